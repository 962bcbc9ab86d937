# tests/test_record_store.py

import pytest

from core.audit_log import AuditLog
from core.config import StoreConfig
from core.response import ErrorCode
from core.sort_engine import SortField, SortOrder
from models.record import Record, RecordPatch
from models.record_store import RecordStore
from models.undo import UndoKind


def ids(store: RecordStore) -> list[int]:
    return [r.id for r in store.records()]


# === load ===


def test_load_snapshot(loaded_store):
    assert loaded_store.is_loaded
    assert len(loaded_store) == 3
    assert ids(loaded_store) == [1001, 1002, 1003]
    assert not loaded_store.has_unsaved_changes


def test_load_single_record_from_sixth_line(empty_store, tmp_path):
    path = tmp_path / "one.txt"
    path.write_text("meta\nmeta\nmeta\n\nheader\n1001 Ada Lovelace ComputerScience 92.5\n")

    response = empty_store.load(str(path))

    assert response.success
    assert response.data["count"] == 1
    assert empty_store.records() == [Record(1001, "Ada Lovelace", "ComputerScience", 92.5)]


def test_load_skips_bad_lines_and_continues(empty_store, tmp_path, caplog):
    path = tmp_path / "mixed.txt"
    path.write_text(
        "a\nb\nc\n\nheader\n"
        "1 Ada Lovelace CS 50\n"
        "x Bad Id CS 50\n"
        "2 Bad Mark CS 101\n"
        "3 Short 50\n"
        "1 Dup Licate CS 60\n"
        "4 Alan Turing Maths 70\n"
    )

    with caplog.at_level("WARNING"):
        response = empty_store.load(str(path))

    assert response.success
    assert response.data["count"] == 2
    assert [line for line, _ in response.data["skipped"]] == [7, 8, 9, 10]
    assert ids(empty_store) == [1, 4]
    assert "line 7" in caplog.text
    assert "line 10" in caplog.text


def test_load_skips_tab_line_whose_name_would_not_read_back(empty_store, tmp_path):
    path = tmp_path / "tabs.txt"
    path.write_text(
        "a\nb\nc\n\nheader\n"
        "7\tCher\tPhysics\t70\n"
        "8\tMary  Jane\tApplied Maths\t60\n"
    )

    response = empty_store.load(str(path))

    assert response.success
    assert [line for line, _ in response.data["skipped"]] == [6]
    assert response.data["skipped"][0][1].startswith("INVALID_FIELD_VALUE")
    assert empty_store.records() == [Record(8, "Mary Jane", "Applied Maths", 60.0)]


def test_load_replaces_previous_contents(loaded_store, tmp_path):
    path = tmp_path / "other.txt"
    path.write_text("a\nb\nc\n\nheader\n9 Grace Hopper Navy 99\n")

    loaded_store.load(str(path))

    assert ids(loaded_store) == [9]
    assert loaded_store.path == str(path)


def test_load_rejects_wrong_extension(empty_store, tmp_path):
    path = tmp_path / "records.csv"
    path.write_text("a\nb\nc\n\nheader\n1 Ada Lovelace CS 50\n")

    response = empty_store.load(str(path))

    assert not response.success
    assert response.error is ErrorCode.INVALID_FIELD_VALUE
    assert not empty_store.is_loaded


def test_load_missing_file_keeps_state(loaded_store, tmp_path):
    response = loaded_store.load(str(tmp_path / "absent.txt"))

    assert not response.success
    assert response.error is ErrorCode.IO_FAILURE
    assert len(loaded_store) == 3


def test_load_resets_pending_undo(loaded_store, snapshot_path):
    loaded_store.delete(1001)
    loaded_store.load(snapshot_path)

    response = loaded_store.undo()

    assert response.error is ErrorCode.NOTHING_TO_UNDO
    assert len(loaded_store) == 3


# === insert ===


def test_insert(loaded_store, sample_record):
    response = loaded_store.insert(sample_record)

    assert response.success
    assert sample_record in loaded_store.records()
    assert loaded_store.has_unsaved_changes


def test_insert_before_load_is_rejected(empty_store, sample_record):
    response = empty_store.insert(sample_record)

    assert not response.success
    assert response.error is ErrorCode.EMPTY_STORE
    assert len(empty_store) == 0


def test_duplicate_insert_leaves_store_unchanged(loaded_store):
    before = loaded_store.records()

    response = loaded_store.insert(Record(1001, "Someone Else", "Art", 10.0))

    assert not response.success
    assert response.error is ErrorCode.DUPLICATE_ID
    assert loaded_store.records() == before


def test_ids_stay_unique_across_inserts(loaded_store):
    for record_id in [5, 6, 5, 1001, 6, 7]:
        loaded_store.insert(Record(record_id, "A B", "C", 50.0))

    all_ids = ids(loaded_store)
    assert len(all_ids) == len(set(all_ids))
    assert sorted(all_ids) == [5, 6, 7, 1001, 1002, 1003]


def test_inserted_record_is_copied(loaded_store, sample_record):
    loaded_store.insert(sample_record)

    found = loaded_store.find_by_id(2001).data["record"]

    assert found == sample_record
    assert found is not sample_record


@pytest.mark.parametrize("name", ["Cher", "Mary Jane Smith", ""])
def test_insert_rejects_name_that_cannot_be_read_back(loaded_store, name):
    response = loaded_store.insert(Record(3001, name, "Physics", 70.0))

    assert not response.success
    assert response.error is ErrorCode.INVALID_FIELD_VALUE
    assert len(loaded_store) == 3
    assert loaded_store.pending_undo.kind is UndoKind.NONE


@pytest.mark.parametrize("name_token_count, name", [(1, "Cher"), (3, "Mary Jane Smith")])
def test_configured_name_length_survives_save_and_open(tmp_path, name_token_count, name):
    config = StoreConfig(
        audit_log_path=str(tmp_path / "audit.log"),
        audit_user="tester",
        name_token_count=name_token_count,
    )
    path = tmp_path / "blank.txt"
    path.write_text("a\nb\nc\n\nheader\n")

    store = RecordStore(config)
    assert store.load(str(path)).success
    assert store.insert(Record(3001, name, "Applied  Physics", 70.0)).success
    assert store.save().success

    reloaded = RecordStore(config)
    reloaded.load(str(path))

    assert reloaded.records() == [Record(3001, name, "Applied Physics", 70.0)]


# === find ===


def test_find_by_id(loaded_store):
    response = loaded_store.find_by_id(1002)

    assert response.success
    assert response.data["index"] == 1
    assert response.data["record"].name == "Alan Turing"


def test_find_missing_id(loaded_store):
    response = loaded_store.find_by_id(9999)

    assert not response.success
    assert response.error is ErrorCode.NOT_FOUND
    assert response.status_code == 404


# === update ===


def test_update_partial_patch(loaded_store):
    response = loaded_store.update(1002, RecordPatch(mark=55.5))

    assert response.success
    assert response.data["changed"]

    record = loaded_store.find_by_id(1002).data["record"]
    assert record.name == "Alan Turing"
    assert record.programme == "Mathematics"
    assert record.mark == 55.5


def test_update_keeps_position(loaded_store):
    loaded_store.update(1002, RecordPatch(name="Alan Mathison"))

    assert ids(loaded_store) == [1001, 1002, 1003]


def test_noop_update_is_distinguishable(loaded_store, read_audit_lines):
    audit_count = len(read_audit_lines(loaded_store))

    response = loaded_store.update(1002, RecordPatch(name="Alan Turing", mark=40.0))

    assert response.success
    assert not response.data["changed"]
    assert len(read_audit_lines(loaded_store)) == audit_count
    assert loaded_store.undo().error is ErrorCode.NOTHING_TO_UNDO


def test_update_missing_id(loaded_store):
    response = loaded_store.update(9999, RecordPatch(mark=1.0))

    assert response.error is ErrorCode.NOT_FOUND


def test_update_rejects_invalid_mark(loaded_store):
    response = loaded_store.update(1001, RecordPatch(mark=101.0))

    assert not response.success
    assert response.error is ErrorCode.INVALID_FIELD_VALUE
    assert loaded_store.find_by_id(1001).data["record"].mark == 92.5


def test_update_rejects_name_that_cannot_be_read_back(loaded_store):
    response = loaded_store.update(1002, RecordPatch(name="Alan Mathison Turing"))

    assert response.error is ErrorCode.INVALID_FIELD_VALUE
    assert loaded_store.find_by_id(1002).data["record"].name == "Alan Turing"
    assert not loaded_store.has_unsaved_changes


# === delete ===


def test_delete_swaps_last_record_into_slot(loaded_store):
    response = loaded_store.delete(1001)

    assert response.success
    assert response.data["record"].id == 1001
    assert ids(loaded_store) == [1003, 1002]


def test_delete_missing_id(loaded_store):
    response = loaded_store.delete(9999)

    assert response.error is ErrorCode.NOT_FOUND
    assert len(loaded_store) == 3


# === summary ===


def test_summary(loaded_store):
    response = loaded_store.summary()

    assert response.success
    assert response.data["count"] == 3
    assert response.data["average"] == pytest.approx(67.83, abs=0.005)
    assert response.data["highest"] == (92.5, "Ada Lovelace")
    assert response.data["lowest"] == (40.0, "Alan Turing")


def test_summary_ties_keep_first_record(loaded_store):
    loaded_store.insert(Record(1, "Late Top", "X", 92.5))
    loaded_store.insert(Record(2, "Late Bottom", "X", 40.0))

    response = loaded_store.summary()

    assert response.data["highest"] == (92.5, "Ada Lovelace")
    assert response.data["lowest"] == (40.0, "Alan Turing")


def test_summary_of_empty_store(empty_store):
    response = empty_store.summary()

    assert not response.success
    assert response.error is ErrorCode.EMPTY_STORE


# === sort ===


def test_sort_is_applied_in_place(loaded_store):
    response = loaded_store.sort(SortField.MARK, SortOrder.DESC)

    assert [r.id for r in response.data["records"]] == [1001, 1003, 1002]
    assert ids(loaded_store) == [1001, 1003, 1002]

    loaded_store.sort(SortField.ID, SortOrder.DESC)
    assert ids(loaded_store) == [1003, 1002, 1001]


# === save ===


def test_save_round_trip(loaded_store, sample_config, sample_audit_log, tmp_path):
    loaded_store.insert(Record(5, "Mary Somerville", "Astronomy", 63.34))
    path = str(tmp_path / "saved.txt")

    response = loaded_store.save(path)

    assert response.success
    assert loaded_store.path == path
    assert not loaded_store.has_unsaved_changes

    reloaded = RecordStore(sample_config, sample_audit_log)
    reloaded.load(path)

    original = sorted(loaded_store.records(), key=lambda r: r.id)
    restored = sorted(reloaded.records(), key=lambda r: r.id)

    assert [r.id for r in restored] == [r.id for r in original]
    for before, after in zip(original, restored):
        assert after.name == before.name
        assert after.programme == before.programme
        assert after.mark == pytest.approx(before.mark, abs=0.05)


def test_save_defaults_to_open_path(loaded_store, snapshot_path):
    loaded_store.delete(1002)

    response = loaded_store.save()

    assert response.success
    assert response.data["path"] == snapshot_path

    with open(snapshot_path) as f:
        assert "Alan Turing" not in f.read()


def test_save_without_path(empty_store):
    response = empty_store.save()

    assert response.error is ErrorCode.EMPTY_STORE


def test_save_to_unwritable_path(loaded_store, tmp_path):
    response = loaded_store.save(str(tmp_path / "missing" / "out.txt"))

    assert response.error is ErrorCode.IO_FAILURE


# === audit ===


def test_mutations_are_audited(loaded_store, snapshot_path, read_audit_lines):
    loaded_store.insert(Record(5, "Mary Somerville", "Astronomy", 63.0))
    loaded_store.update(5, RecordPatch(mark=64.0))
    loaded_store.delete(1001)
    loaded_store.undo()

    lines = read_audit_lines(loaded_store)

    assert lines[0] == f"[2025-10-01 09:30:15] [tester] (Records: 3) OPEN {snapshot_path} (3 records)"
    assert lines[1].endswith("(Records: 4) INSERT 5 Mary Somerville Astronomy 63.0")
    assert lines[2].endswith("(Records: 4) UPDATE 5")
    assert lines[3].endswith("(Records: 3) DELETE 1001")
    assert lines[4].endswith("(Records: 4) UNDO DELETED 1001")


def test_audit_failure_does_not_abort_mutation(sample_config, snapshot_path, tmp_path):
    broken_log = AuditLog(str(tmp_path / "missing" / "audit.log"), "tester")
    store = RecordStore(sample_config, broken_log)

    assert store.load(snapshot_path).success

    response = store.delete(1001)

    assert response.success
    assert "audit_warning" in response.data
    assert store.find_by_id(1001).error is ErrorCode.NOT_FOUND
