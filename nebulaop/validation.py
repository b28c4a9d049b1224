"""Field validation of replica counts for cluster components."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

_MIN_REPLICAS_GRAPHD_NOT_IN_HA_MODE = 1
_MIN_REPLICAS_GRAPHD_IN_HA_MODE = 2
_MIN_REPLICAS_METAD_NOT_IN_HA_MODE = 1
_MIN_REPLICAS_METAD_IN_HA_MODE = 3
_MIN_REPLICAS_STORAGED_NOT_IN_HA_MODE = 1
_MIN_REPLICAS_STORAGED_IN_HA_MODE = 3

_NOT_HA_MODE_DETAIL = "should be at least {} not in ha mode"
_HA_MODE_DETAIL = "should be at least {} in ha mode"
_ODD_NUMBER_DETAIL = "should be odd number"


class FieldPath:
    """A dotted path to a field of an object, such as ``spec.replicas``."""

    __slots__ = ("_names",)

    def __init__(self, name: str, *more: str) -> None:
        self._names: tuple[str, ...] = (name, *more)

    def child(self, *args: str) -> FieldPath:
        """Return the path extended by one or more field names."""
        if not args:
            raise TypeError("child() needs at least one field name")
        return FieldPath(*self._names, *args)

    def __str__(self) -> str:
        return ".".join(self._names)

    def __repr__(self) -> str:
        return f"FieldPath({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldPath):
            return NotImplemented
        return self._names == other._names

    def __hash__(self) -> int:
        return hash(self._names)


class ErrorType(str, Enum):
    INVALID = "FieldValueInvalid"


@dataclass(frozen=True)
class FieldError:
    """A problem found with the value of one field."""

    type: ErrorType
    field: str
    bad_value: Any
    detail: str

    def __str__(self) -> str:
        shown = json.dumps(self.bad_value) if isinstance(self.bad_value, str) else str(self.bad_value)
        return f"{self.field}: Invalid value: {shown}: {self.detail}"


def invalid(path: FieldPath, value: Any, detail: str) -> FieldError:
    """Report ``value`` at ``path`` as invalid."""
    return FieldError(ErrorType.INVALID, str(path), value, detail)


def validate_min_replicas(path: FieldPath, actual_value: int, min_value: int, ha_mode: bool) -> FieldError | None:
    """Return an error when ``actual_value`` is below ``min_value``."""
    if actual_value >= min_value:
        return None
    template = _HA_MODE_DETAIL if ha_mode else _NOT_HA_MODE_DETAIL
    return invalid(path, actual_value, template.format(min_value))


def validate_odd_number(path: FieldPath, value: int) -> FieldError | None:
    """Return an error when ``value`` is even."""
    if value & 1 == 0:
        return invalid(path, value, _ODD_NUMBER_DETAIL)
    return None


def _check_minimum(path: FieldPath, replicas: int, ha_mode: bool, normal: int, ha: int) -> list[FieldError]:
    error = validate_min_replicas(path, replicas, ha if ha_mode else normal, ha_mode)
    return [error] if error is not None else []


def validate_min_replicas_graphd(path: FieldPath, replicas: int, ha_mode: bool) -> list[FieldError]:
    """Validate the graphd replica count."""
    return _check_minimum(
        path, replicas, ha_mode, _MIN_REPLICAS_GRAPHD_NOT_IN_HA_MODE, _MIN_REPLICAS_GRAPHD_IN_HA_MODE
    )


def validate_min_replicas_metad(path: FieldPath, replicas: int, ha_mode: bool) -> list[FieldError]:
    """Validate the metad replica count, which must also be odd."""
    errors = _check_minimum(
        path, replicas, ha_mode, _MIN_REPLICAS_METAD_NOT_IN_HA_MODE, _MIN_REPLICAS_METAD_IN_HA_MODE
    )
    odd_error = validate_odd_number(path, replicas)
    if odd_error is not None:
        errors.append(odd_error)
    return errors


def validate_min_replicas_storaged(path: FieldPath, replicas: int, ha_mode: bool) -> list[FieldError]:
    """Validate the storaged replica count."""
    return _check_minimum(
        path, replicas, ha_mode, _MIN_REPLICAS_STORAGED_NOT_IN_HA_MODE, _MIN_REPLICAS_STORAGED_IN_HA_MODE
    )