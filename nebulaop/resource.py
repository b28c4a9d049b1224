"""Group, version, resource and kind names of the workloads a cluster uses."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class GroupResource:
    """A resource name qualified by its API group."""

    group: str = ""
    resource: str = ""


@dataclass(frozen=True)
class GroupVersionResource:
    """A resource name qualified by its API group and version."""

    group: str = ""
    version: str = ""
    resource: str = ""

    def __str__(self) -> str:
        return f"{self.group}/{self.version}, Resource={self.resource}"


@dataclass(frozen=True)
class GroupVersionKind:
    """A kind name qualified by its API group and version."""

    group: str = ""
    version: str = ""
    kind: str = ""

    def __str__(self) -> str:
        return f"{self.group}/{self.version}, Kind={self.kind}"


class NoResourceMatchError(LookupError):
    """No kind is known for the requested resource."""

    def __init__(self, partial_resource: GroupVersionResource) -> None:
        super().__init__(f"no matches for {partial_resource}")
        self.partial_resource = partial_resource


class Discovery(Protocol):
    """Anything that can map a resource to the kinds that serve it."""

    def kinds_for(self, resource: GroupVersionResource) -> Sequence[GroupVersionKind]: ...


NEBULA_CLUSTER_KIND = GroupVersionKind("apps.nebula-graph.io", "v1alpha1", "NebulaCluster")
STATEFUL_SET_KIND = GroupVersionKind("apps", "v1", "StatefulSet")
ADVANCED_STATEFUL_SET_KIND = GroupVersionKind("apps.kruise.io", "v1alpha1", "StatefulSet")
UNITED_DEPLOYMENT_KIND = GroupVersionKind("apps.kruise.io", "v1alpha1", "UnitedDeployment")


def parse_group_resource(text: str) -> GroupResource:
    """Split ``resource.group`` at its first dot; without a dot the group is empty."""
    resource, dot, group = text.partition(".")
    if not dot:
        return GroupResource(resource=text)
    return GroupResource(group=group, resource=resource)


def get_stateful_set_gvr() -> GroupVersionResource:
    """Return the resource of plain stateful sets."""
    return GroupVersionResource(group="apps", version="v1", resource="statefulsets")


def get_advanced_stateful_set_gvr() -> GroupVersionResource:
    """Return the resource of advanced stateful sets."""
    return GroupVersionResource(group="apps.kruise.io", version="v1alpha1", resource="statefulsets")


def get_united_deployment_gvr() -> GroupVersionResource:
    """Return the resource of united deployments."""
    return GroupVersionResource(group="apps.kruise.io", version="v1alpha1", resource="uniteddeployments")


GROUP_VERSION_RESOURCES: dict[str, Callable[[], GroupVersionResource]] = {
    str(STATEFUL_SET_KIND): get_stateful_set_gvr,
    str(ADVANCED_STATEFUL_SET_KIND): get_advanced_stateful_set_gvr,
    str(UNITED_DEPLOYMENT_KIND): get_united_deployment_gvr,
}


def get_gvk_from_definition(discovery: Discovery, name: str = "", version: str = "") -> GroupVersionKind:
    """Resolve the kind of a workload reference.

    An empty ``name`` gives the plain stateful set kind. Otherwise the first
    kind that ``discovery`` reports for the resource is returned; when it
    reports none, NoResourceMatchError is raised.
    """
    if not name:
        return STATEFUL_SET_KIND
    group_resource = parse_group_resource(name)
    gvr = GroupVersionResource(
        group=group_resource.group,
        version=version,
        resource=group_resource.resource,
    )
    kinds = discovery.kinds_for(gvr)
    if not kinds:
        raise NoResourceMatchError(gvr)
    return kinds[0]