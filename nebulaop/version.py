"""Build and runtime version information."""

from __future__ import annotations

import platform as _platform
import re
import sys
from dataclasses import dataclass, fields
from datetime import datetime, timedelta, timezone

UNDEFINED = "<undefined>"

# Filled in at build time; left undefined otherwise.
GIT_VERSION = UNDEFINED
GIT_COMMIT = UNDEFINED
GIT_TIMESTAMP = UNDEFINED
BUILD_TIMESTAMP = UNDEFINED

_INTEGER = re.compile(r"[+-]?[0-9]+")
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class Info:
    """Version details of the running build."""

    git_version: str
    git_commit: str
    git_date: str
    build_date: str
    python_version: str
    compiler: str
    platform: str

    def __str__(self) -> str:
        body = ", ".join(f"{f.name}={getattr(self, f.name)!r}" for f in fields(self))
        return f"Info{{{body}}}"


def version() -> Info:
    """Return the version information of this build and interpreter."""
    return Info(
        git_version=GIT_VERSION,
        git_commit=GIT_COMMIT,
        git_date=_conv_date(GIT_TIMESTAMP),
        build_date=_conv_date(BUILD_TIMESTAMP),
        python_version=_platform.python_version(),
        compiler=_platform.python_implementation(),
        platform=f"{sys.platform}/{_platform.machine() or 'unknown'}",
    )


def _conv_date(timestamp: str) -> str:
    """Turn a Unix timestamp string into an RFC 3339 UTC date."""
    if not _INTEGER.fullmatch(timestamp):
        return UNDEFINED
    try:
        moment = _EPOCH + timedelta(seconds=int(timestamp))
    except OverflowError:
        return UNDEFINED
    return (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
        f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}Z"
    )