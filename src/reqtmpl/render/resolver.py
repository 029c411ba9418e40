"""Resolver - flattens an environment chain into one variable table."""

from __future__ import annotations

from typing import Dict, Iterable, Sequence

from reqtmpl.models import Environment, EnvironmentVariable


def make_vars_table(environment_chain: Sequence[Environment]) -> Dict[str, str]:
    """Build the name -> value table for a render pass.

    The chain is ordered most specific first. Environments are applied from
    the end of the chain (most general) to the front, so the most specific
    definition of a name wins.

    Variables that are disabled or have an empty value are skipped: they
    neither define a name nor override a more general definition.

    Args:
        environment_chain: Environments, most specific first.

    Returns:
        A fresh dict of variable values.
    """
    table: Dict[str, str] = {}
    for environment in reversed(environment_chain):
        _add_variables(table, environment.variables)
    return table


def _add_variables(
    table: Dict[str, str], variables: Iterable[EnvironmentVariable]
) -> None:
    for variable in variables:
        if not variable.enabled or variable.value == "":
            continue
        table[variable.name] = variable.value
