# tests/conftest.py

import datetime

import pytest

from core.audit_log import AuditLog
from core.config import StoreConfig
from models.record import Record
from models.record_store import RecordStore

FIXED_NOW = datetime.datetime(2025, 10, 1, 9, 30, 15)

SNAPSHOT_TEXT = """\
Database Name: CMS
Authors: Test Team
Table Name: StudentRecords

ID         Name            Programme                 Mark
1001       Ada Lovelace    ComputerScience           92.5
1002       Alan Turing     Mathematics               40.0
1003       Grace Hopper    SoftwareEngineering       71.0
"""


@pytest.fixture
def sample_config(tmp_path):
    return StoreConfig(
        audit_log_path=str(tmp_path / "audit.log"),
        audit_user="tester",
    )


@pytest.fixture
def sample_audit_log(sample_config):
    return AuditLog(sample_config.audit_log_path, "tester", clock=lambda: FIXED_NOW)


@pytest.fixture
def snapshot_path(tmp_path):
    path = tmp_path / "records.txt"
    path.write_text(SNAPSHOT_TEXT)
    return str(path)


@pytest.fixture
def empty_store(sample_config, sample_audit_log):
    return RecordStore(sample_config, sample_audit_log)


@pytest.fixture
def loaded_store(empty_store, snapshot_path):
    response = empty_store.load(snapshot_path)
    assert response.success
    return empty_store


@pytest.fixture
def sample_record():
    return Record(2001, "Katherine Johnson", "Physics", 88.0)


@pytest.fixture
def read_audit_lines():
    def read(store: RecordStore) -> list[str]:
        with open(store.audit_log.path) as f:
            return f.read().splitlines()

    return read
