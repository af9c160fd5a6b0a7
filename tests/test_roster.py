import pytest  # pyright: ignore

from classrecord import ImportStatus, RosterImportRow, Student, Students, reconcile


def _directory():
    return Students(
        [
            Student("S1", "Jo", "Lee", rfid="RF-1"),
            Student("S2", "Ana", "Reyes", rfid="RF-2"),
            Student("S3", "Ben", "Cruz"),
        ]
    )


def _row(student_id, first="Jo", last="Lee"):
    return RosterImportRow(student_id, first, last)


def test_empty_input_gives_empty_output():
    assert reconcile([], set(), _directory().by_id) == []


def test_duplicate_row_in_batch_is_skipped_after_first_import():
    # given
    rows = [_row("S1"), _row("S1")]

    # when
    outcomes = reconcile(rows, set(), _directory().by_id)

    # then
    assert [o.status for o in outcomes] == [ImportStatus.IMPORTED, ImportStatus.SKIPPED]
    assert outcomes[0].message == "Successfully added to course"
    assert outcomes[1].message == "Already enrolled in this course"


def test_each_row_gets_one_outcome_in_order():
    # given
    rows = [
        _row("S2", "Ana", "Reyes"),
        _row("S9"),
        RosterImportRow("", "Jo", None),
        _row("S3", "Ben", "Cruz"),
        _row("S1"),
    ]

    # when
    outcomes = reconcile(rows, {"S1"}, _directory().by_id)

    # then
    assert [o.row for o in outcomes] == [1, 2, 3, 4, 5]
    assert [(o.status, o.message) for o in outcomes] == [
        (ImportStatus.IMPORTED, "Successfully added to course"),
        (ImportStatus.SKIPPED, "Student not found in database"),
        (ImportStatus.ERROR, "Missing required fields: student_id, last_name"),
        (ImportStatus.SKIPPED, "Student does not have RFID registration"),
        (ImportStatus.SKIPPED, "Already enrolled in this course"),
    ]
    assert outcomes[2].student_id is None


def test_missing_fields_take_precedence_over_enrollment():
    # given
    rows = [RosterImportRow("S1", "  ", "Lee")]

    # when
    outcomes = reconcile(rows, {"S1"}, _directory().by_id)

    # then
    assert outcomes[0].status is ImportStatus.ERROR
    assert outcomes[0].message == "Missing required fields: first_name"


def test_existing_roster_is_not_modified():
    # given
    roster = {"S2"}

    # when
    reconcile([_row("S1")], roster, _directory().by_id)

    # then
    assert roster == {"S2"}


def test_enroll_is_called_for_imported_students_only():
    # given
    enrolled = []

    # when
    reconcile(
        [_row("S1"), _row("S3"), _row("S1")], set(), _directory().by_id, enrolled.append
    )

    # then
    assert [s.student_id for s in enrolled] == ["S1"]


def test_failure_in_one_row_does_not_stop_the_batch():
    # given
    def enroll(student):
        if student.student_id == "S1":
            raise RuntimeError("connection lost")

    rows = [_row("S1"), _row("S2", "Ana", "Reyes"), _row("S1")]

    # when
    outcomes = reconcile(rows, set(), _directory().by_id, enroll)

    # then
    assert [(o.status, o.message) for o in outcomes] == [
        (ImportStatus.ERROR, "connection lost"),
        (ImportStatus.IMPORTED, "Successfully added to course"),
        (ImportStatus.ERROR, "connection lost"),
    ]


def test_lookup_failure_becomes_error_outcome():
    # given
    def lookup(student_id):
        raise LookupError("database unavailable")

    # when
    outcomes = reconcile([_row("S1")], set(), lookup)

    # then
    assert outcomes[0].status is ImportStatus.ERROR
    assert outcomes[0].message == "database unavailable"


def test_rows_are_numbered_from_start():
    # when
    outcomes = reconcile([_row("S1"), _row("S2")], set(), _directory().by_id, start=2)

    # then
    assert [o.row for o in outcomes] == [2, 3]


def test_outcomes_are_immutable():
    # given
    outcome = reconcile([_row("S1")], set(), _directory().by_id)[0]

    # when/then
    with pytest.raises(AttributeError):
        outcome.status = ImportStatus.ERROR
