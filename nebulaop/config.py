"""Merging of custom flags into flag-file configuration text."""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping

_PARAM_PATTERN = re.compile(r"--(\w+)=(.+)", re.ASCII)
_CUSTOM_HEADER = "\n########## Custom ##########\n"


def append_custom_config(data: str, custom: Mapping[str, str] | None) -> str:
    """Apply ``custom`` flag values to the ``--name=value`` lines of ``data``.

    Flags already present take the custom value; the remaining custom flags
    are appended, sorted, under a custom section. Empty lines and comments are
    kept; other lines that are not flags are dropped.
    """
    if not custom:
        return data

    pending = dict(custom)
    out: list[str] = []
    for line in _lines(data):
        if line == "" or line.startswith("#"):
            out.append(f"{line}\n")
            continue
        if not line.startswith("--"):
            continue
        match = _PARAM_PATTERN.search(line)
        if match is None:
            out.append(f"{line}\n")
            continue
        param, value = match.group(1), match.group(2)
        value = pending.pop(param, value)
        out.append(f"--{param}={value}\n")

    if pending:
        out.append(_CUSTOM_HEADER)
    out.extend(f"--{key}={pending[key]}\n" for key in sorted(pending))
    return "".join(out)


def _lines(data: str) -> Iterator[str]:
    parts = data.split("\n")
    if parts[-1] == "":
        parts.pop()
    for part in parts:
        yield part[:-1] if part.endswith("\r") else part