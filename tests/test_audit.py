import logging

from classrecord import audit


def test_log_action_emits_record_on_audit_logger(caplog):
    # when
    with caplog.at_level(logging.INFO, logger="classrecord.audit"):
        record = audit.log_action(
            "IMPORT_STUDENTS", "courses", user_id="u1", after={"imported": 3}
        )

    # then
    assert record.action == "IMPORT_STUDENTS"
    [log] = [r for r in caplog.records if r.name == "classrecord.audit"]
    assert log.audit["after"] == {"imported": 3}
    assert log.audit["user_id"] == "u1"


def test_log_action_requires_action_and_module(caplog):
    # when
    with caplog.at_level(logging.INFO, logger="classrecord.audit"):
        record = audit.log_action("", "courses")

    # then
    assert record is None
    assert any(r.levelno == logging.ERROR for r in caplog.records)


def test_sanitize_truncates_large_payloads():
    # given
    payload = {"data": "x" * 100}

    # when
    result = audit.sanitize(payload, max_size=50)

    # then
    assert result["_truncated"] is True
    assert result["_size"] > 50


def test_sanitize_keeps_small_payloads():
    payload = {"a": 1}
    assert audit.sanitize(payload) is payload


def test_sanitize_marks_unserializable_payloads():
    # given
    payload = {"a": 1}
    payload["self"] = payload

    # when
    result = audit.sanitize(payload)

    # then
    assert result["_error"] is True
