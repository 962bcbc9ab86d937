# tests/test_audit_log.py

import datetime

from core.audit_log import AuditLog
from core.response import ErrorCode


def test_append_writes_formatted_line(sample_audit_log):
    response = sample_audit_log.append("DELETE 1001", 2)

    assert response.success
    assert response.data["line"] == "[2025-10-01 09:30:15] [tester] (Records: 2) DELETE 1001"

    with open(sample_audit_log.path) as f:
        assert f.read() == response.data["line"] + "\n"


def test_append_never_truncates(sample_audit_log):
    sample_audit_log.append("INSERT 1", 1)
    sample_audit_log.append("UNDO INSERTED 1", 0)

    with open(sample_audit_log.path) as f:
        lines = f.read().splitlines()

    assert len(lines) == 2
    assert lines[0].endswith("(Records: 1) INSERT 1")
    assert lines[1].endswith("(Records: 0) UNDO INSERTED 1")


def test_unwritable_log_fails_without_raising(tmp_path):
    audit_log = AuditLog(
        str(tmp_path / "missing" / "audit.log"),
        "tester",
        clock=lambda: datetime.datetime(2025, 10, 1),
    )

    response = audit_log.append("SAVE x.txt", 0)

    assert not response.success
    assert response.error is ErrorCode.IO_FAILURE
