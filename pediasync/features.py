"""Feature gates for the cluster synchro manager."""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass
from typing import Dict, List, Mapping


class PreRelease(str, enum.Enum):
    ALPHA = "ALPHA"
    BETA = "BETA"
    GA = ""
    DEPRECATED = "DEPRECATED"


@dataclass(frozen=True)
class FeatureSpec:
    default: bool
    pre_release: PreRelease = PreRelease.ALPHA
    lock_to_default: bool = False


# Prune `managedFields` of synchronized resources.
PRUNE_MANAGED_FIELDS = "PruneManagedFields"
# Prune the last-applied-configuration annotation of synchronized resources.
PRUNE_LAST_APPLIED_CONFIGURATION = "PruneLastAppliedConfiguration"
# Allow syncing of all custom resources.
ALLOW_SYNC_ALL_CUSTOM_RESOURCES = "AllowSyncAllCustomResources"
# Allow syncing of all resources.
ALLOW_SYNC_ALL_RESOURCES = "AllowSyncAllResources"
# Let the cluster health checker use its own TCP connection.
HEALTH_CHECKER_WITH_STANDALONE_TCP = "HealthCheckerWithStandaloneTCP"

DEFAULT_FEATURES: Dict[str, FeatureSpec] = {
    PRUNE_MANAGED_FIELDS: FeatureSpec(default=True, pre_release=PreRelease.BETA),
    PRUNE_LAST_APPLIED_CONFIGURATION: FeatureSpec(default=True, pre_release=PreRelease.BETA),
    ALLOW_SYNC_ALL_CUSTOM_RESOURCES: FeatureSpec(default=False, pre_release=PreRelease.ALPHA),
    ALLOW_SYNC_ALL_RESOURCES: FeatureSpec(default=False, pre_release=PreRelease.ALPHA),
    HEALTH_CHECKER_WITH_STANDALONE_TCP: FeatureSpec(default=False, pre_release=PreRelease.ALPHA),
}

_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}


def _parse_bool(value: str) -> bool:
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"invalid syntax: {value!r}")


class FeatureGate:
    """A set of known features and their current on/off state."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._known: Dict[str, FeatureSpec] = {}
        self._enabled: Dict[str, bool] = {}

    def add(self, features: Mapping[str, FeatureSpec]) -> None:
        """Register features; re-adding one with a different spec is an error."""
        with self._lock:
            for name, spec in features.items():
                existing = self._known.get(name)
                if existing is not None and existing != spec:
                    raise ValueError(
                        f"feature gate {name} with different spec already exists: {existing}"
                    )
            self._known.update(features)

    def enabled(self, name: str) -> bool:
        with self._lock:
            if name in self._enabled:
                return self._enabled[name]
            spec = self._known.get(name)
        if spec is None:
            raise KeyError(f"feature {name} is not registered in FeatureGate")
        return spec.default

    def set(self, name: str, value: bool) -> None:
        self._set_from_map({name: value})

    def set_from_string(self, value: str) -> None:
        """Apply settings written as ``Name=bool,Name=bool``; all or nothing."""
        settings: Dict[str, bool] = {}
        for part in value.split(","):
            if not part:
                continue
            name, sep, raw = part.partition("=")
            name = name.strip()
            if not sep:
                raise ValueError(f"missing bool value for {name}")
            raw = raw.strip()
            try:
                settings[name] = _parse_bool(raw)
            except ValueError as err:
                raise ValueError(f"invalid value of {name}={raw}, err: {err}") from None
        self._set_from_map(settings)

    def _set_from_map(self, settings: Mapping[str, bool]) -> None:
        with self._lock:
            for name, value in settings.items():
                spec = self._known.get(name)
                if spec is None:
                    raise ValueError(f"unrecognized feature gate: {name}")
                if spec.lock_to_default and spec.default != value:
                    raise ValueError(
                        f"cannot set feature gate {name} to {value}, "
                        f"feature is locked to {spec.default}"
                    )
            self._enabled.update(settings)

    def known_features(self) -> List[str]:
        """Describe the settable pre-release features, sorted."""
        with self._lock:
            known = [
                f"{name}=true|false ({spec.pre_release.value} - default={str(spec.default).lower()})"
                for name, spec in self._known.items()
                if spec.pre_release not in (PreRelease.GA, PreRelease.DEPRECATED)
            ]
        return sorted(known)


def default_feature_gate() -> FeatureGate:
    """Return a new gate holding the cluster synchro manager's features."""
    gate = FeatureGate()
    gate.add(DEFAULT_FEATURES)
    return gate


FEATURE_GATE = default_feature_gate()