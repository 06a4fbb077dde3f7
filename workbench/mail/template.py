"""Minimal ``${name}`` placeholder substitution."""

from __future__ import annotations

import re
from collections.abc import Mapping

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]*)\}")


def render_template(tpl: str, variables: Mapping[str, str]) -> str:
    """Replace each ``${key}`` with ``variables[key]``.

    Placeholders whose key is unknown are left as they are; a ``${`` with no
    closing brace is ordinary text.
    """

    def substitute(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in variables:
            return variables[key]
        return match.group(0)

    return _PLACEHOLDER_RE.sub(substitute, tpl)