# pediasync

Building blocks for synchronizing resources from many clusters into one
store. The package has no dependencies outside the standard library.

## Modules

- `pediasync.queue`: `PressureQueue`, a FIFO of object keys that keeps only
  the latest event per key, folding successive events with
  `pressure_events` (an update after a pending add stays an add, an add after
  a pending delete becomes an update, a delete always wins). A popped key stays
  "processing" until `done` is called; events arriving in the meantime are held
  and the key is queued again on `done`. Also `reput`, `pop_all`,
  `discard_and_retain`, `len()` and `close`. Popping from a closed, empty queue
  raises `QueueClosedError`. Events are `Event` objects with an `ActionType`.
- `pediasync.ratelimiter`: `ItemExponentialFailureAndJitterSlowRateLimiter`,
  with delays in seconds. The first `max_fast_attempts` failures of an item
  back off exponentially up to `fast_max_delay`; later ones wait
  `slow_base_delay` plus a random jitter. `num_requeues` and `forget` track and
  reset an item's failures.
- `pediasync.request`: `RequestContext`, an immutable key/value chain, with
  `with_cluster_name` / `cluster_name_from` / `cluster_name_value`,
  `with_accept_header` / `accept_header_from` and `with_request_query` /
  `request_query_from` / `has_request_query`. Empty names and headers, and a
  `None` query, return the parent context unchanged.
- `pediasync.filters`: WSGI middleware. `with_accept_header` stores the
  `Accept` header, `with_request_query` stores the parsed query string, and
  `remove_field_selector_from_request` stores the original query and then
  removes a non-empty `fieldSelector` from `QUERY_STRING` (the remaining
  parameters are re-encoded in sorted order). `request_context(environ)`
  returns the stored context, or an empty one.
- `pediasync.features`: `FeatureGate` (`add`, `enabled`, `set`,
  `set_from_string("Name=true,Other=false")`, `known_features`), `FeatureSpec`
  and `PreRelease`. `default_feature_gate()` returns a gate holding
  `PruneManagedFields` and `PruneLastAppliedConfiguration` (on by default),
  and `AllowSyncAllCustomResources`, `AllowSyncAllResources` and
  `HealthCheckerWithStandaloneTCP` (off by default). `FEATURE_GATE` is a shared
  instance.
- `pediasync.conditions`: `Condition`, `ConditionStatus`,
  `find_status_condition`, `set_status_condition`, `remove_status_condition`
  and `ready_condition`, which is true only when every required condition is
  true and otherwise names the first one that is missing or not true.
- `pediasync.resource_status`: `GroupResource`, `GroupVersionResource`,
  `GroupKind`, `ResourceSyncCondition`, and `GroupResourceStatus`, which tracks
  synchronized resources, their versions and each version's sync condition
  (`add_resource`, `add_sync_condition`, `update_sync_condition`,
  `delete_version`, `load_group_resources_statuses`,
  `storage_gvr_to_sync_gvrs`, `merge`). `negotiate_sync_versions` picks the
  versions to sync, given a mapping of built-in kinds to their known versions,
  and raises `VersionNegotiationError` when none can be synced.
- `pediasync.versionstorage`: `ResourceVersionStorage`, a thread-safe map from
  object key to resource version, and `object_key`, which turns an object of
  the form `{"metadata": {"namespace": ..., "name": ...}}` into
  `namespace/name` (or `name`).
- `pediasync.deltas`: `Delta`, `DeltaType`, `compare_resource_version`,
  `handle_deltas` (applies deltas to a resource version storage; a replaced
  object that is not newer produces no update, and an equal version produces
  a sync) and `process_deltas` (applies deltas to a general store).
- `pediasync.handlers`: `ResourceEventHandlerFuncs` and
  `FilteringResourceEventHandler`, which turns an update crossing the filter
  into an add or a delete.
- `pediasync.negotiation`: `EndpointRestrictions` and the presets
  `TABLE_ENDPOINT_RESTRICTIONS`,
  `PARTIAL_OBJECT_METADATA_ENDPOINT_RESTRICTIONS` and
  `DEFAULT_ENDPOINT_RESTRICTIONS`.
- `pediasync.watchevent`: `new_error_event`, which wraps a `Status`, a
  `StatusError` or any other error in an `ERROR` `WatchEvent`.

## Example

```python
from pediasync.queue import PressureQueue

queue = PressureQueue(lambda obj: obj["name"])
queue.add({"name": "a"})
queue.update({"name": "a"})   # folded into a single "Added" event
event = queue.pop()
queue.done(event)
```

```python
from pediasync.ratelimiter import ItemExponentialFailureAndJitterSlowRateLimiter

limiter = ItemExponentialFailureAndJitterSlowRateLimiter(1.0, 5.0, 10.0, 1.0, 5)
limiter.when("cluster-1")   # 1.0
limiter.when("cluster-1")   # 2.0
limiter.forget("cluster-1")
```

## What it does not do

These are pieces, not a running synchronizer. The package does not connect to
clusters, list or watch their resources, check their health, or write to any
storage backend; there is no manager process that runs the pieces together,
and no command-line program. The caller supplies objects, stores and handlers.

## Tests

The test suite uses pytest; install the `test` extra to get it.