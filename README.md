# nebulaop

Building blocks for managing graph database clusters. The package needs
nothing outside the standard library.

## Installation

```
pip install .
```

To run the tests, install the `test` extra and run `pytest`:

```
pip install ".[test]"
pytest
```

## What it offers

- `nebulaop.config.append_custom_config(data, custom)` merges `--flag=value`
  overrides into the text of a flags file. A flag already in the file takes
  the custom value in place. The custom flags that are left over are
  appended, sorted by name, under a `########## Custom ##########` header.
  Empty lines and `#` comments are kept. Other lines that do not start with
  `--` are dropped.
- `nebulaop.extender` works on workload objects held as plain nested dicts:
  `get_spec`, `get_template_spec`, `get_status`, `get_replicas`,
  `get_containers`, `set_spec_field`, `set_template_annotations`,
  `set_update_partition`, `set_container_image`,
  `set_last_applied_config_annotation`, `object_equal`, `pod_template_equal`
  and `is_updating`. The last-applied spec is stored as JSON under the
  annotation `nebula-graph.io/last-applied-configuration`.
- `nebulaop.validation` checks replica counts:
  - `validate_min_replicas_graphd` needs at least 1 replica, or 2 in HA mode.
  - `validate_min_replicas_metad` needs at least 1 replica, or 3 in HA mode,
    and the count must also be odd.
  - `validate_min_replicas_storaged` needs at least 1 replica, or 3 in HA
    mode.

  Each of these returns a list of `FieldError` values, which is empty when
  the count is valid. The building blocks `validate_min_replicas`,
  `validate_odd_number` and `invalid` return a single `FieldError`, or `None`
  when there is nothing to report. Paths are written as `FieldPath`, for
  example `FieldPath("spec").child("replicas")`.
- `nebulaop.condition` keeps a `ClusterStatus` holding a list of `Condition`
  entries. Use `new_condition`, `get_condition` and `set_condition` to work
  with it. `set_condition` does nothing when the status and reason are
  unchanged. When only the reason changes, it keeps the previous transition
  time.
- `nebulaop.resource` provides:
  - the `GroupVersionResource` and `GroupVersionKind` descriptors, and
    `parse_group_resource`;
  - the resources of the supported workloads, from
    `get_stateful_set_gvr`, `get_advanced_stateful_set_gvr` and
    `get_united_deployment_gvr`;
  - `get_gvk_from_definition(discovery, name, version)`. It asks any object
    with a `kinds_for(resource)` method for the kind of a workload
    reference, and raises `NoResourceMatchError` when no kind is known.
- `nebulaop.webhook`:
  - `register_handlers(handlers, target=None)` adds handlers to a
    path-to-handler map. It skips empty paths and prefixes a `/` where one
    is missing. A later handler replaces an earlier one at the same path.
  - `setup_with_manager(manager, handlers=None)` calls
    `manager.webhook_server.register(path, handler)` once for each entry.
- Smaller helpers:
  - `codec.encode` gives compact JSON with sorted keys and HTML-safe
    strings.
  - `hashing.hash_text` returns the first 16 hex digits of the SHA-512
    digest.
  - `maputil.is_sub_map`.
  - `errors.ReconcileError`, with `reconcile_error` and
    `is_reconcile_error`.
  - `version.version()` returns an `Info` record.

## Example

```python
from nebulaop.config import append_custom_config
from nebulaop.validation import FieldPath, validate_min_replicas_metad

print(append_custom_config("--enable_authorize=false\n", {"enable_authorize": "true"}))

for error in validate_min_replicas_metad(FieldPath("spec", "replicas"), 2, True):
    print(error)
# spec.replicas: Invalid value: 2: should be at least 3 in ha mode
# spec.replicas: Invalid value: 2: should be odd number
```

## What it does not do

This is a library of helpers, not a running cluster controller. Keep these
limits in mind:

- It has no command-line program.
- It does not talk to a cluster API server. Workload objects are plain dicts
  you supply. Kind lookup goes through whatever discovery object you pass in.
- It serves no HTTPS endpoint for admission webhooks. `setup_with_manager`
  only hands handlers to a server object you provide.
- It has no admission handlers of its own that decode and check whole
  cluster or stateful set requests.