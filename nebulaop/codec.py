"""Compact JSON encoding with sorted mapping keys and HTML-safe strings."""

from __future__ import annotations

import base64
import dataclasses
import math
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

_STRING_ESCAPES: dict[int, str] = {code: f"\\u{code:04x}" for code in range(0x20)}
_STRING_ESCAPES.update(
    {
        ord('"'): '\\"',
        ord("\\"): "\\\\",
        ord("\n"): "\\n",
        ord("\r"): "\\r",
        ord("\t"): "\\t",
        ord("<"): "\\u003c",
        ord(">"): "\\u003e",
        ord("&"): "\\u0026",
        0x2028: "\\u2028",
        0x2029: "\\u2029",
    }
)
_STRING_ESCAPES.update({code: "\ufffd" for code in range(0xD800, 0xE000)})


def encode(obj: Any) -> str:
    """Encode ``obj`` as compact JSON text.

    Mapping keys are sorted, dataclass fields keep their declared order and
    bytes become base64 strings. Unsupported values raise TypeError or
    ValueError.
    """
    out: list[str] = []
    _write(obj, out)
    return "".join(out)


def _write(value: Any, out: list[str]) -> None:
    if value is None:
        out.append("null")
    elif isinstance(value, bool):
        out.append("true" if value else "false")
    elif isinstance(value, int):
        out.append(str(int(value)))
    elif isinstance(value, float):
        out.append(_format_float(value))
    elif isinstance(value, str):
        out.append(_quote(value))
    elif isinstance(value, (bytes, bytearray)):
        out.append('"' + base64.b64encode(bytes(value)).decode("ascii") + '"')
    elif dataclasses.is_dataclass(value) and not isinstance(value, type):
        _write_members(((f.name, getattr(value, f.name)) for f in dataclasses.fields(value)), out)
    elif isinstance(value, Mapping):
        members = sorted(((_key(k), v) for k, v in value.items()), key=lambda item: item[0])
        _write_members(members, out)
    elif isinstance(value, (list, tuple)):
        out.append("[")
        for position, item in enumerate(value):
            if position:
                out.append(",")
            _write(item, out)
        out.append("]")
    else:
        raise TypeError(f"json: unsupported type: {type(value).__name__}")


def _write_members(members, out: list[str]) -> None:
    out.append("{")
    for position, (name, item) in enumerate(members):
        if position:
            out.append(",")
        out.append(_quote(name))
        out.append(":")
        _write(item, out)
    out.append("}")


def _key(key: Any) -> str:
    if isinstance(key, str):
        return key
    if isinstance(key, int) and not isinstance(key, bool):
        return str(int(key))
    raise TypeError(f"json: unsupported map key type: {type(key).__name__}")


def _quote(text: str) -> str:
    return '"' + text.translate(_STRING_ESCAPES) + '"'


def _format_float(number: float) -> str:
    if math.isnan(number) or math.isinf(number):
        raise ValueError(f"json: unsupported value: {number!r}")
    magnitude = abs(number)
    if magnitude != 0 and (magnitude < 1e-6 or magnitude >= 1e21):
        mantissa, _, exponent = repr(number).partition("e")
        if exponent.startswith("-0"):
            exponent = "-" + exponent[2:]
        return f"{mantissa}e{exponent}"
    return format(Decimal(repr(number)).normalize(), "f")