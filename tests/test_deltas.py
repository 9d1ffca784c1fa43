import pytest

from pediasync.deltas import Delta, DeltaType, compare_resource_version, handle_deltas, process_deltas
from pediasync.versionstorage import ResourceVersionStorage


def make(name, rv):
    return {"metadata": {"namespace": "default", "name": name, "resourceVersion": rv}}


class Recorder:
    def __init__(self):
        self.calls = []

    def on_add(self, obj, is_in_initial_list):
        self.calls.append(("add", obj, is_in_initial_list))

    def on_update(self, old_obj, new_obj):
        self.calls.append(("update", old_obj, new_obj))

    def on_delete(self, obj):
        self.calls.append(("delete", obj))

    def on_sync(self, obj):
        self.calls.append(("sync", obj))


@pytest.mark.parametrize(
    "obj_rv, rv, expected",
    [
        ("5", "5", 0),
        ("4", "5", -1),
        ("6", "5", 1),
        ("", "", 0),
        ("", "0", 0),
        ("abc", "5", -1),
        ("5", "x", -1),
        ("-1", "0", -1),
        ("5", None, -1),
    ],
)
def test_compare_resource_version(obj_rv, rv, expected):
    assert compare_resource_version(make("a", obj_rv), rv) == expected


def test_compare_without_metadata():
    assert compare_resource_version("not-an-object", "1") == -1


def test_handle_deltas_add_new():
    storage = ResourceVersionStorage()
    rec = Recorder()
    obj = make("a", "3")
    handle_deltas([Delta(DeltaType.ADDED, obj)], storage, rec, True)
    assert rec.calls == [("add", obj, True)]
    assert storage.get(obj) == "3"


def test_handle_deltas_replaced_same_version_syncs():
    storage = ResourceVersionStorage()
    storage.add(make("a", "3"))
    rec = Recorder()
    obj = make("a", "3")
    handle_deltas([Delta(DeltaType.REPLACED, obj)], storage, rec, False)
    assert rec.calls == [("sync", obj)]


def test_handle_deltas_replaced_older_version_ignored():
    storage = ResourceVersionStorage()
    storage.add(make("a", "5"))
    rec = Recorder()
    handle_deltas([Delta(DeltaType.REPLACED, make("a", "3"))], storage, rec, False)
    assert rec.calls == []
    assert storage.get(make("a", "")) == "5"


def test_handle_deltas_replaced_newer_version_updates():
    storage = ResourceVersionStorage()
    storage.add(make("a", "3"))
    rec = Recorder()
    obj = make("a", "9")
    handle_deltas([Delta(DeltaType.REPLACED, obj)], storage, rec, False)
    assert rec.calls == [("update", None, obj)]
    assert storage.get(obj) == "9"


def test_handle_deltas_updated_and_deleted():
    storage = ResourceVersionStorage()
    storage.add(make("a", "1"))
    rec = Recorder()
    updated = make("a", "2")
    handle_deltas(
        [Delta(DeltaType.UPDATED, updated), Delta(DeltaType.DELETED, updated)],
        storage,
        rec,
        False,
    )
    assert rec.calls == [("update", None, updated), ("delete", updated)]
    assert storage.get(updated) is None


def test_handle_deltas_sync_type_ignored():
    storage = ResourceVersionStorage()
    rec = Recorder()
    handle_deltas([Delta(DeltaType.SYNC, make("a", "1"))], storage, rec, False)
    assert rec.calls == []
    assert storage.list_keys() == []


def test_process_deltas_add_then_update():
    storage = ResourceVersionStorage()
    rec = Recorder()
    first, second = make("a", "1"), make("a", "2")
    process_deltas(
        rec, storage, None, [Delta(DeltaType.ADDED, first), Delta(DeltaType.SYNC, second)], True
    )
    assert rec.calls == [("add", first, True), ("update", "1", second)]
    assert storage.get(second) == "2"


def test_process_deltas_delete():
    storage = ResourceVersionStorage()
    obj = make("a", "1")
    storage.add(obj)
    rec = Recorder()
    process_deltas(rec, storage, None, [Delta(DeltaType.DELETED, obj)], False)
    assert rec.calls == [("delete", obj)]
    assert storage.get(obj) is None


def test_process_deltas_transformer_applied():
    storage = ResourceVersionStorage()
    rec = Recorder()
    transformed = make("b", "7")
    process_deltas(rec, storage, lambda _: transformed, [Delta(DeltaType.ADDED, make("a", "1"))], False)
    assert rec.calls == [("add", transformed, False)]
    assert storage.get(transformed) == "7"
    assert storage.get(make("a", "1")) is None


def test_process_deltas_transformer_error_propagates():
    def broken(_):
        raise RuntimeError("transform failed")

    storage = ResourceVersionStorage()
    with pytest.raises(RuntimeError):
        process_deltas(Recorder(), storage, broken, [Delta(DeltaType.ADDED, make("a", "1"))], False)