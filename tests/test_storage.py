"""Tests for the durable counter and record collection."""

import json
import threading
from datetime import datetime, timezone

import pytest

from cert_installer.core import CertificateRecord, StorageError
from cert_installer.storage import (
    AliasSequencer,
    CertificateRecordStore,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
)
from cert_installer.storage.records import RECORDS_KEY
from cert_installer.storage.sequence import COUNTER_KEY


def make_record(alias: str, common_name: str = "Jane Doe") -> CertificateRecord:
    return CertificateRecord(
        alias=alias,
        common_name=common_name,
        subject_dn=f"CN={common_name},O=ExampleCorp",
        issuer_dn="CN=Example Issuing CA,O=ExampleCorp",
        serial_number="1A2B3C",
        valid_from=datetime(2025, 1, 1, tzinfo=timezone.utc),
        valid_to=datetime(2027, 1, 1, tzinfo=timezone.utc),
        installed_at=datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
    )


def test_alias_sequence_starts_at_one():
    """Test aliases are cert1, cert2, ... in call order."""
    sequencer = AliasSequencer(InMemoryKeyValueStore())

    assert [sequencer.next_alias() for _ in range(3)] == ["cert1", "cert2", "cert3"]
    assert sequencer.current() == 3


def test_alias_sequence_survives_restart(tmp_path):
    """Test the counter is durable across store instances."""
    path = tmp_path / "state.json"
    AliasSequencer(JsonFileKeyValueStore(path)).next_alias()
    AliasSequencer(JsonFileKeyValueStore(path)).next_alias()

    assert AliasSequencer(JsonFileKeyValueStore(path)).next_alias() == "cert3"


def test_alias_sequence_concurrent_calls_unique():
    """Test overlapping calls never yield the same alias."""
    sequencer = AliasSequencer(InMemoryKeyValueStore())
    aliases = []
    lock = threading.Lock()

    def worker():
        for _ in range(25):
            alias = sequencer.next_alias()
            with lock:
                aliases.append(alias)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(aliases) == 200
    assert len(set(aliases)) == 200
    assert sequencer.current() == 200


def test_alias_sequence_unique_across_store_instances(tmp_path):
    """Test separate stores opened on one state file never issue the same alias."""
    path = tmp_path / "state.json"
    sequencers = [AliasSequencer(JsonFileKeyValueStore(path)) for _ in range(2)]
    aliases = []
    lock = threading.Lock()

    def worker(sequencer):
        for _ in range(50):
            alias = sequencer.next_alias()
            with lock:
                aliases.append(alias)

    threads = [threading.Thread(target=worker, args=(sequencers[i % 2],)) for i in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(set(aliases)) == 200
    assert AliasSequencer(JsonFileKeyValueStore(path)).current() == 200


def test_alias_sequence_rejects_corrupt_counter():
    """Test a corrupt counter is not silently reset."""
    store = InMemoryKeyValueStore()
    store.put(COUNTER_KEY, "seven")

    with pytest.raises(StorageError):
        AliasSequencer(store).next_alias()


def test_record_round_trip_unicode(tmp_path):
    """Test records survive serialization, including non-ASCII names."""
    path = tmp_path / "state.json"
    record = make_record("cert1", common_name="Jürgen Müller 日本")
    CertificateRecordStore(JsonFileKeyValueStore(path)).append(record)

    loaded = CertificateRecordStore(JsonFileKeyValueStore(path)).all()

    assert loaded == [record]
    assert "Jürgen" in path.read_text(encoding="utf-8")


def test_records_keep_insertion_order():
    """Test all() returns records in append order."""
    store = CertificateRecordStore(InMemoryKeyValueStore())
    for alias in ("cert1", "cert2", "cert3"):
        store.append(make_record(alias))

    assert [r.alias for r in store.all()] == ["cert1", "cert2", "cert3"]


def test_remove_by_alias():
    """Test removal leaves other records in their original order."""
    store = CertificateRecordStore(InMemoryKeyValueStore())
    for alias in ("cert1", "cert2", "cert3"):
        store.append(make_record(alias))

    assert store.remove_by_alias("cert2") == 1
    assert [r.alias for r in store.all()] == ["cert1", "cert3"]
    assert store.find("cert2") is None


def test_remove_by_alias_removes_duplicates():
    """Test every record with the alias is removed."""
    store = CertificateRecordStore(InMemoryKeyValueStore())
    store.append(make_record("cert1"))
    store.append(make_record("cert1", common_name="Other"))
    store.append(make_record("cert2"))

    assert store.remove_by_alias("cert1") == 2
    assert [r.alias for r in store.all()] == ["cert2"]


def test_remove_unknown_alias():
    """Test removing an unknown alias removes nothing."""
    store = CertificateRecordStore(InMemoryKeyValueStore())
    store.append(make_record("cert1"))

    assert store.remove_by_alias("cert9") == 0
    assert store.count() == 1


def test_empty_store():
    """Test an empty store lists nothing."""
    store = CertificateRecordStore(InMemoryKeyValueStore())
    assert store.all() == []
    assert store.load().skipped == 0


def test_malformed_records_are_skipped_and_counted():
    """Test unreadable entries are skipped and counted."""
    kv = InMemoryKeyValueStore()
    good = make_record("cert1").model_dump(mode="json")
    kv.put(RECORDS_KEY, [good, {"alias": "cert2"}, "garbage", {**good, "alias": "cert3"}])

    loaded = CertificateRecordStore(kv).load()

    assert [r.alias for r in loaded.records] == ["cert1", "cert3"]
    assert loaded.skipped == 2


def test_records_stored_as_json_string():
    """Test a collection stored as a JSON string is still readable."""
    kv = InMemoryKeyValueStore()
    kv.put(RECORDS_KEY, json.dumps([make_record("cert1").model_dump(mode="json")]))

    assert [r.alias for r in CertificateRecordStore(kv).all()] == ["cert1"]


def test_unparseable_collection():
    """Test a collection that is not JSON counts as one skipped entry."""
    kv = InMemoryKeyValueStore()
    kv.put(RECORDS_KEY, "[{not json")

    loaded = CertificateRecordStore(kv).load()
    assert loaded.records == []
    assert loaded.skipped == 1


def test_concurrent_appends_do_not_lose_updates():
    """Test concurrent writers all land in the collection."""
    store = CertificateRecordStore(InMemoryKeyValueStore())

    def worker(index):
        for n in range(10):
            store.append(make_record(f"cert{index}-{n}"))

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(5)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert store.count() == 50


def test_json_file_store_corrupt_file(tmp_path):
    """Test an unreadable state file raises StorageError."""
    path = tmp_path / "state.json"
    path.write_text("{broken")

    with pytest.raises(StorageError):
        JsonFileKeyValueStore(path).get(COUNTER_KEY)


def test_json_file_store_leaves_no_temp_files(tmp_path):
    """Test writes replace the file atomically."""
    store = JsonFileKeyValueStore(tmp_path / "nested" / "state.json")
    store.put("a", 1)
    store.put("b", 2)

    assert [p.name for p in (tmp_path / "nested").iterdir()] == ["state.json"]
    assert store.get("a") == 1
    assert store.get("b") == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
