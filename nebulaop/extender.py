"""Accessors and updates for workloads held as JSON-like nested mappings."""

from __future__ import annotations

import copy
import json
import logging
from typing import Any

from .codec import encode

ANN_LAST_APPLIED_CONFIG_KEY = "nebula-graph.io/last-applied-configuration"

_log = logging.getLogger(__name__)

_CONTAINERS = ("spec", "template", "spec", "containers")
_TEMPLATE_ANNOTATIONS = ("spec", "template", "metadata", "annotations")
_ANNOTATIONS = ("metadata", "annotations")


def _json_path(fields: tuple[str, ...]) -> str:
    return "." + ".".join(fields)


def _nested_field(obj: Any, *fields: str) -> tuple[Any, bool]:
    """Return the value at ``fields`` and whether it was found."""
    value = obj
    for position, name in enumerate(fields):
        if value is None:
            return None, False
        if not isinstance(value, dict):
            raise ValueError(
                f"{_json_path(fields[:position + 1])} accessor error: {value!r} is of the type "
                f"{type(value).__name__}, expected map"
            )
        if name not in value:
            return None, False
        value = value[name]
    return value, True


def _nested_map(obj: Any, *fields: str) -> tuple[dict | None, bool]:
    value, found = _nested_field(obj, *fields)
    if not found:
        return None, False
    if not isinstance(value, dict):
        raise ValueError(
            f"{_json_path(fields)} accessor error: {value!r} is of the type "
            f"{type(value).__name__}, expected map"
        )
    return copy.deepcopy(value), True


def _nested_int(obj: Any, *fields: str) -> int | None:
    value, found = _nested_field(obj, *fields)
    if not found:
        return None
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(
            f"{_json_path(fields)} accessor error: {value!r} is of the type "
            f"{type(value).__name__}, expected int"
        )
    return value


def _nested_string_map(obj: Any, *fields: str) -> dict[str, str] | None:
    value, found = _nested_field(obj, *fields)
    if not found:
        return None
    if not isinstance(value, dict):
        raise ValueError(
            f"{_json_path(fields)} accessor error: {value!r} is of the type "
            f"{type(value).__name__}, expected map"
        )
    result: dict[str, str] = {}
    for key, item in value.items():
        if not isinstance(item, str):
            raise ValueError(
                f"{_json_path(fields)} accessor error: contains non-string value in the map "
                f"under key {key!r}: {item!r} is of the type {type(item).__name__}, expected string"
            )
        result[key] = item
    return result


def _set_nested_field(obj: dict, value: Any, *fields: str) -> None:
    value = copy.deepcopy(value)
    current = obj
    for position, name in enumerate(fields[:-1]):
        if name in current:
            child = current[name]
            if not isinstance(child, dict):
                raise ValueError(
                    f"value cannot be set because {_json_path(fields[:position + 1])} is not a map"
                )
            current = child
        else:
            child = {}
            current[name] = child
            current = child
    current[fields[-1]] = value


def _map_or_none(obj: Any, *fields: str) -> dict | None:
    try:
        value, found = _nested_map(obj, *fields)
    except ValueError:
        return None
    return value if found else None


def _get_annotations(obj: dict) -> dict[str, str] | None:
    try:
        return _nested_string_map(obj, *_ANNOTATIONS)
    except ValueError:
        return None


def _set_annotations(obj: dict, annotations: dict[str, str]) -> None:
    try:
        _set_nested_field(obj, dict(annotations), *_ANNOTATIONS)
    except ValueError as err:
        _log.error("setting annotations failed: %s", err)


def _get_string(obj: dict, *fields: str) -> str:
    try:
        value, found = _nested_field(obj, *fields)
    except ValueError:
        return ""
    return value if found and isinstance(value, str) else ""


def _get_generation(obj: dict) -> int:
    try:
        return _nested_int(obj, "metadata", "generation") or 0
    except ValueError:
        return 0


def _to_int32(value: int) -> int:
    return ((value + 2**31) & 0xFFFFFFFF) - 2**31


def _require_int(value: Any, what: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{what} is of the type {type(value).__name__}, expected int")
    return value


def _require_number(value: Any, what: str) -> float:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise TypeError(f"{what} is of the type {type(value).__name__}, expected number")
    return value


def _require_map(value: Any, what: str) -> dict:
    if not isinstance(value, dict):
        raise TypeError(f"{what} is of the type {type(value).__name__}, expected map")
    return value


def _json_equal(left: Any, right: Any) -> bool:
    if isinstance(left, dict) or isinstance(right, dict):
        return (
            isinstance(left, dict)
            and isinstance(right, dict)
            and left.keys() == right.keys()
            and all(_json_equal(left[key], right[key]) for key in left)
        )
    if isinstance(left, list) or isinstance(right, list):
        return (
            isinstance(left, list)
            and isinstance(right, list)
            and len(left) == len(right)
            and all(_json_equal(a, b) for a, b in zip(left, right))
        )
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    return left == right


def _template_equal(old_template: Any, new_template: Any) -> bool:
    try:
        old_value = json.loads(encode(old_template))
        new_value = json.loads(encode(new_template))
    except (TypeError, ValueError) as err:
        _log.error("unmarshal failed: %s", err)
        return False
    return _json_equal(old_value, new_value)


def _decode_applied_config(text: str) -> dict:
    value = json.loads(text)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"applied configuration is a {type(value).__name__}, expected an object")
    return value


def get_spec(obj: dict) -> dict | None:
    """Return a copy of ``spec``, or None when absent or not a mapping."""
    return _map_or_none(obj, "spec")


def get_template_spec(obj: dict) -> dict | None:
    """Return a copy of ``spec.template.spec``, or None."""
    return _map_or_none(obj, "spec", "template", "spec")


def get_status(obj: dict) -> dict | None:
    """Return a copy of ``status``, or None."""
    return _map_or_none(obj, "status")


def get_replicas(obj: dict) -> int | None:
    """Return ``spec.replicas`` as a 32-bit integer, or None."""
    try:
        replicas = _nested_int(obj, "spec", "replicas")
    except ValueError:
        return None
    return None if replicas is None else _to_int32(replicas)


def get_containers(obj: dict) -> list[dict] | None:
    """Return the pod template's containers, or None when absent."""
    try:
        value, found = _nested_field(obj, *_CONTAINERS)
    except ValueError:
        return None
    if not found:
        return None
    if not isinstance(value, list):
        raise TypeError(f"containers is of the type {type(value).__name__}, expected list")
    containers = []
    for container in value:
        containers.append(_require_map(container, "container"))
    return containers


def set_spec_field(obj: dict, value: Any, *args: str) -> None:
    """Set a copy of ``value`` at ``spec`` followed by ``args``."""
    _set_nested_field(obj, value, "spec", *args)


def set_template_annotations(obj: dict, annotations: dict[str, str] | None) -> None:
    """Merge ``annotations`` into the pod template's annotations."""
    merged = _nested_string_map(obj, *_TEMPLATE_ANNOTATIONS) or {}
    merged.update(annotations or {})
    _set_nested_field(obj, merged, *_TEMPLATE_ANNOTATIONS)


def is_updating(obj: dict) -> bool:
    """Tell whether the workload is rolling out a new revision."""
    status = get_status(obj)
    if status is None:
        return False
    if any(status.get(key) is None for key in ("currentRevision", "updateRevision", "observedGeneration")):
        return False
    if status["currentRevision"] != status["updateRevision"]:
        return True
    observed = _require_int(status["observedGeneration"], "status.observedGeneration")
    if _get_generation(obj) <= observed:
        return False
    desired = get_replicas(obj)
    if desired is None:
        raise TypeError("spec.replicas is not set")
    return desired == _require_int(status.get("replicas"), "status.replicas")


def pod_template_equal(new_obj: dict, old_obj: dict) -> bool:
    """Compare the new pod template with the last applied one of ``old_obj``."""
    new_template = get_template_spec(new_obj)
    annotations = _get_annotations(old_obj) or {}
    if ANN_LAST_APPLIED_CONFIG_KEY not in annotations:
        return False
    try:
        old_spec = _decode_applied_config(annotations[ANN_LAST_APPLIED_CONFIG_KEY])
    except ValueError as err:
        _log.error(
            "applied config failed: %s namespace=%s name=%s",
            err,
            _get_string(old_obj, "metadata", "namespace"),
            _get_string(old_obj, "metadata", "name"),
        )
        return False
    try:
        old_template, _ = _nested_map(old_spec, "template", "spec")
    except ValueError:
        old_template = None
    return _template_equal(new_template, old_template)


def object_equal(new_obj: dict, old_obj: dict) -> bool:
    """Tell whether ``new_obj`` matches what was last applied to ``old_obj``."""
    old_annotations = _get_annotations(old_obj) or {}
    kept = {key: value for key, value in old_annotations.items() if key != ANN_LAST_APPLIED_CONFIG_KEY}
    if (_get_annotations(new_obj) or {}) != kept:
        return False
    if ANN_LAST_APPLIED_CONFIG_KEY not in old_annotations:
        return False
    try:
        old_spec = _decode_applied_config(old_annotations[ANN_LAST_APPLIED_CONFIG_KEY])
    except ValueError as err:
        _log.error(
            "unmarshal failed: %s kind=%s namespace=%s name=%s",
            err,
            _get_string(old_obj, "kind"),
            _get_string(old_obj, "metadata", "namespace"),
            _get_string(old_obj, "metadata", "name"),
        )
        return False
    new_spec = get_spec(new_obj) or {}
    return (
        int(_require_number(old_spec.get("replicas"), "applied replicas"))
        == _require_int(new_spec.get("replicas"), "spec.replicas")
        and _template_equal(
            _require_map(old_spec.get("template"), "applied template"),
            _require_map(new_spec.get("template"), "spec.template"),
        )
        and _template_equal(
            _require_map(old_spec.get("updateStrategy"), "applied updateStrategy"),
            _require_map(new_spec.get("updateStrategy"), "spec.updateStrategy"),
        )
    )


def set_last_applied_config_annotation(obj: dict) -> None:
    """Record the current spec as JSON in the last-applied annotation."""
    applied = encode(get_spec(obj))
    annotations = dict(_get_annotations(obj) or {})
    annotations[ANN_LAST_APPLIED_CONFIG_KEY] = applied
    _set_annotations(obj, annotations)


def set_update_partition(obj: dict, upgrade_ordinal: int, grace_period: int, advanced: bool) -> None:
    """Configure a partitioned rolling update starting at ``upgrade_ordinal``."""
    set_spec_field(obj, "RollingUpdate", "updateStrategy", "type")
    set_spec_field(obj, upgrade_ordinal, "updateStrategy", "rollingUpdate", "partition")
    if advanced:
        set_spec_field(obj, "InPlaceIfPossible", "updateStrategy", "rollingUpdate", "podUpdatePolicy")
        set_spec_field(
            obj,
            grace_period,
            "updateStrategy",
            "rollingUpdate",
            "inPlaceUpdateStrategy",
            "gracePeriodSeconds",
        )


def set_container_image(obj: dict, container_name: str, image: str) -> None:
    """Set the image of every pod template container named ``container_name``."""
    value, found = _nested_field(obj, *_CONTAINERS)
    if not found:
        return
    containers = copy.deepcopy(value)
    if not isinstance(containers, list):
        raise TypeError(f"containers is of the type {type(containers).__name__}, expected list")
    matched = False
    for container in containers:
        _require_map(container, "container")
        if container.get("name") == container_name:
            container["image"] = image
            matched = True
    if matched:
        _set_nested_field(obj, containers, *_CONTAINERS)