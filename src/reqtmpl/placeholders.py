"""Path placeholders.

A URL parameter named ``:id`` fills the ``/:id`` segment of the URL path
instead of being sent as a query parameter.
"""

from __future__ import annotations

import logging
import re
from typing import List, Sequence, Tuple
from urllib.parse import quote

from reqtmpl.models import HttpUrlParameter

log = logging.getLogger(__name__)


def replace_path_placeholder(parameter: HttpUrlParameter, url: str) -> str:
    """Substitute one ``:name`` parameter into the URL path."""
    if not parameter.enabled or not parameter.name.startswith(":"):
        return url

    # the trailing separator is not consumed, so back-to-back segments all match
    pattern = re.compile(f"(/){re.escape(parameter.name)}(?=[/?#]|$)")
    value = quote(parameter.value, safe="")
    return pattern.sub(lambda m: m.group(1) + value, url)


def apply_path_placeholders(
    url: str, parameters: Sequence[HttpUrlParameter]
) -> Tuple[str, List[HttpUrlParameter]]:
    """Apply every path placeholder parameter to `url`.

    Returns:
        The new URL and the parameters that are still needed as query
        parameters. Disabled and unnamed parameters are dropped, as are
        parameters that were substituted into the path.
    """
    remaining: List[HttpUrlParameter] = []
    for p in parameters:
        if not p.enabled or not p.name:
            continue
        new_url = replace_path_placeholder(p, url)
        if new_url == url:
            remaining.append(p)
        else:
            log.debug("Applied path placeholder %s", p.name)
            url = new_url
    return url, remaining
