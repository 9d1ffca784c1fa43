"""Sync version negotiation and the per-resource sync status of a cluster."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

RESOURCE_SYNC_STATUS_PENDING = "Pending"
RESOURCE_SYNC_STATUS_SYNCING = "Syncing"
RESOURCE_SYNC_STATUS_STOP = "Stop"
RESOURCE_SYNC_STATUS_UNKNOWN = "Unknown"
RESOURCE_SYNC_STATUS_ERROR = "Error"

# Custom resources without requested versions sync at most this many versions.
_MAX_DEFAULT_VERSIONS = 3


@dataclass(frozen=True)
class GroupKind:
    group: str = ""
    kind: str = ""


@dataclass(frozen=True)
class GroupResource:
    group: str = ""
    resource: str = ""

    def with_version(self, version: str) -> "GroupVersionResource":
        return GroupVersionResource(self.group, version, self.resource)

    def __str__(self) -> str:
        return self.resource if not self.group else f"{self.resource}.{self.group}"


@dataclass(frozen=True)
class GroupVersionResource:
    group: str = ""
    version: str = ""
    resource: str = ""

    def group_resource(self) -> GroupResource:
        return GroupResource(self.group, self.resource)


_EMPTY_GVR = GroupVersionResource()


def _parse_group_resource(text: str) -> GroupResource:
    resource, sep, group = text.partition(".")
    return GroupResource(group, resource) if sep else GroupResource("", text)


@dataclass
class ResourceSyncCondition:
    """Sync state of one version of a resource."""

    version: str = ""
    sync_version: str = ""
    sync_resource: str = ""
    storage_version: str = ""
    storage_resource: str = ""
    status: str = ""
    reason: str = ""
    message: str = ""
    last_transition_time: Optional[datetime] = None

    def storage_gvr(self, group_resource: GroupResource) -> GroupVersionResource:
        """Return the resource this version is stored as; empty if not decided."""
        if not self.storage_version:
            return _EMPTY_GVR
        if self.storage_resource:
            group_resource = _parse_group_resource(self.storage_resource)
        return group_resource.with_version(self.storage_version)


@dataclass
class ResourceStatus:
    name: str
    kind: str
    namespaced: bool
    sync_conditions: List[ResourceSyncCondition] = field(default_factory=list)


@dataclass
class GroupResourcesStatus:
    group: str
    resources: List[ResourceStatus] = field(default_factory=list)


class VersionNegotiationError(Exception):
    """No version of a resource can be synchronized."""

    def __init__(self, message: str, legacy: bool) -> None:
        super().__init__(message)
        self.legacy = legacy


def negotiate_sync_versions(
    kind: GroupKind,
    want_versions: Sequence[str],
    supported_versions: Sequence[str],
    known_versions: Mapping[GroupKind, Iterable[str]],
) -> Tuple[List[str], bool]:
    """Choose which versions of a resource to sync.

    ``known_versions`` maps built-in kinds to the versions the server code knows.
    Returns the versions and whether the kind is a built-in (legacy) one; a
    built-in kind syncs only its first supported known version. Raises
    VersionNegotiationError when nothing can be synced.
    """
    if not supported_versions:
        raise VersionNegotiationError("The supported versions are empty", legacy=False)

    knowns = set(known_versions.get(kind, ()))
    if knowns:
        for version in supported_versions:
            if version in knowns:
                return [version], True
        raise VersionNegotiationError(
            "The supported versions do not contain any known versions", legacy=True
        )

    if not want_versions:
        return list(supported_versions[:_MAX_DEFAULT_VERSIONS]), False

    wants = set(want_versions)
    if "*" in wants:
        return list(supported_versions), False

    sync_versions = [version for version in supported_versions if version in wants]
    if not sync_versions:
        raise VersionNegotiationError(
            "The supported versions do not contain any specified sync version", legacy=False
        )
    return sync_versions, False


class GroupResourceStatus:
    """The resources being synced, their versions and each version's sync condition."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._sorted_grs: List[GroupResource] = []
        self._resources: Dict[GroupResource, ResourceStatus] = {}
        self._versions: Dict[GroupResource, Set[str]] = {}
        self._sync_conditions: Dict[GroupVersionResource, ResourceSyncCondition] = {}

    def add_resource(self, group_resource: GroupResource, kind: str, namespaced: bool) -> None:
        with self._lock:
            if group_resource not in self._resources:
                if group_resource not in self._sorted_grs:
                    self._sorted_grs.append(group_resource)
                self._versions[group_resource] = set()
            self._resources[group_resource] = ResourceStatus(
                name=group_resource.resource, kind=kind, namespaced=namespaced
            )

    def add_sync_condition(self, gvr: GroupVersionResource, condition: ResourceSyncCondition) -> None:
        """Record the condition of a version; ignored if its resource was not added."""
        with self._lock:
            gr = gvr.group_resource()
            if gr not in self._resources:
                return
            self._versions[gr].add(gvr.version)
            self._sync_conditions[gvr] = condition

    def update_sync_condition(self, gvr: GroupVersionResource, status: str, reason: str, message: str) -> None:
        with self._lock:
            cond = self._sync_conditions.get(gvr)
            if cond is None:
                return
            self._sync_conditions[gvr] = replace(cond, status=status, reason=reason, message=message)

    def delete_version(self, gvr: GroupVersionResource) -> None:
        """Forget a version; the resource goes too once it has no versions left."""
        with self._lock:
            gr = gvr.group_resource()
            if gr not in self._resources:
                return
            self._sync_conditions.pop(gvr, None)
            self._versions[gr].discard(gvr.version)
            if not self._versions[gr]:
                del self._resources[gr]
                del self._versions[gr]

    def load_group_resources_statuses(self) -> List[GroupResourcesStatus]:
        """Return statuses grouped by API group, in the order resources were added."""
        with self._lock:
            groups: Dict[str, GroupResourcesStatus] = {}
            for gr in self._sorted_grs:
                resource = self._resources.get(gr)
                if resource is None:
                    continue
                conditions = [
                    replace(self._sync_conditions[gr.with_version(version)])
                    for version in sorted(self._versions[gr])
                ]
                group = groups.setdefault(gr.group, GroupResourcesStatus(group=gr.group))
                group.resources.append(replace(resource, sync_conditions=conditions))
            return list(groups.values())

    def storage_gvr_to_sync_gvrs(self) -> Dict[GroupVersionResource, Set[GroupVersionResource]]:
        """Map each storage resource to the synced resources stored as it."""
        with self._lock:
            mapping: Dict[GroupVersionResource, Set[GroupVersionResource]] = {}
            for gvr, cond in self._sync_conditions.items():
                storage_gvr = cond.storage_gvr(gvr.group_resource())
                if storage_gvr == _EMPTY_GVR:
                    continue
                mapping.setdefault(storage_gvr, set()).add(gvr)
            return mapping

    def merge(self, other: Optional["GroupResourceStatus"]) -> Optional[Set[GroupVersionResource]]:
        """Add the versions of ``other`` missing here; return the versions added.

        Returns None when ``other`` is None or both hold the same versions.
        """
        if other is None:
            return None
        with self._lock, other._lock:
            if self._versions == other._versions:
                return None

            addition: Set[GroupVersionResource] = set()
            for gr, resource in other._resources.items():
                other_versions = other._versions.get(gr)
                if not other_versions:
                    continue

                if gr not in self._resources:
                    if gr not in self._sorted_grs:
                        self._sorted_grs.append(gr)
                    self._resources[gr] = resource
                    self._versions[gr] = set(other_versions)
                    for version in other_versions:
                        gvr = gr.with_version(version)
                        self._sync_conditions[gvr] = other._sync_conditions[gvr]
                        addition.add(gvr)
                    continue

                for version in other_versions:
                    gvr = gr.with_version(version)
                    if gvr in self._sync_conditions:
                        continue
                    self._versions[gr].add(version)
                    self._sync_conditions[gvr] = other._sync_conditions[gvr]
                    addition.add(gvr)
            return addition