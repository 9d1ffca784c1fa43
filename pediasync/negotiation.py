"""Which media-type transforms and stream schemas an endpoint allows."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

META_GROUP = "meta.k8s.io"
META_VERSIONS = frozenset({"v1", "v1beta1"})


@dataclass(frozen=True)
class GroupVersionKind:
    group: str = ""
    version: str = ""
    kind: str = ""


@dataclass(frozen=True)
class EndpointRestrictions:
    allow_table: bool = False
    allow_partial_object_metadata: bool = False
    server_versions: FrozenSet[str] = field(default_factory=frozenset)

    def allows_media_type_transform(
        self, mime_type: str, mime_sub_type: str, gvk: Optional[GroupVersionKind]
    ) -> bool:
        """Allow Table as JSON or YAML and PartialObjectMetadata(List), as configured."""
        if gvk is None:
            return False
        if gvk.group != META_GROUP or gvk.version not in META_VERSIONS:
            return False

        if gvk.kind == "Table":
            return self.allow_table and mime_type == "application" and mime_sub_type in ("json", "yaml")
        if gvk.kind in ("PartialObjectMetadata", "PartialObjectMetadataList"):
            return self.allow_partial_object_metadata
        return False

    def allows_server_version(self, version: str) -> bool:
        """Allow only the listed server versions; none are listed by default."""
        return version in self.server_versions

    def allows_stream_schema(self, schema: str) -> bool:
        return schema == "watch"


TABLE_ENDPOINT_RESTRICTIONS = EndpointRestrictions(allow_table=True)
PARTIAL_OBJECT_METADATA_ENDPOINT_RESTRICTIONS = EndpointRestrictions(allow_partial_object_metadata=True)
DEFAULT_ENDPOINT_RESTRICTIONS = EndpointRestrictions(allow_table=True, allow_partial_object_metadata=True)