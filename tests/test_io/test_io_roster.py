import pandas as pd
import pytest  # pyright: ignore

import classrecord
import classrecord.io.roster
from classrecord import ImportStatus, RosterImportRow, Student, Students
from classrecord.io.roster import parse_full_name


# parse_full_name ----------------------------------------------------------------------


def test_parse_full_name_with_middle_initial():
    assert parse_full_name("Dela Cruz, Juan A.") == ("Dela Cruz", "Juan", "A")


def test_parse_full_name_with_compound_first_name():
    assert parse_full_name("Santos, Maria Clara B.") == ("Santos", "Maria Clara", "B")


def test_parse_full_name_reads_short_final_word_as_middle_initial():
    assert parse_full_name("Lee, Jo Bo") == ("Lee", "Jo", "Bo")
    assert parse_full_name("Lee, Jo Bob") == ("Lee", "Jo Bob", None)


def test_parse_full_name_without_middle_initial():
    assert parse_full_name("Santos, Maria") == ("Santos", "Maria", None)


@pytest.mark.parametrize("text", ["Juan Dela Cruz", ", Juan", "Dela Cruz,", ""])
def test_parse_full_name_returns_none_for_other_forms(text):
    assert parse_full_name(text) is None


# read ---------------------------------------------------------------------------------


def test_read_csv_with_full_names(tmp_path):
    # given
    path = tmp_path / "roster.csv"
    path.write_text(
        "Student Number,Full Name\n"
        " 2021-0001 ,\"Dela Cruz, Juan A.\"\n"
        "2021-0002,Juan Dela Cruz\n"
        ",\"Santos, Maria\"\n"
    )

    # when
    rows = classrecord.io.roster.read(path)

    # then
    assert rows == [
        RosterImportRow("2021-0001", "Juan", "Dela Cruz", "A"),
        RosterImportRow("2021-0002", None, None),
        RosterImportRow(None, "Maria", "Santos"),
    ]


def test_read_csv_with_separate_name_columns(tmp_path):
    # given
    path = tmp_path / "roster.csv"
    path.write_text(
        "student number,first name,last name,middle initial\n"
        "S1,Jo,Lee,\n"
        "S2,Ana,Reyes,B\n"
    )

    # when
    rows = classrecord.io.roster.read(path)

    # then
    assert rows == [
        RosterImportRow("S1", "Jo", "Lee"),
        RosterImportRow("S2", "Ana", "Reyes", "B"),
    ]


def test_read_excel(tmp_path):
    # given
    path = tmp_path / "roster.xlsx"
    pd.DataFrame(
        {"Student Number": ["S1", "S2"], "Full Name": ["Lee, Jo", "Reyes, Ana B."]}
    ).to_excel(path, index=False)

    # when
    rows = classrecord.io.roster.read(path)

    # then
    assert rows == [
        RosterImportRow("S1", "Jo", "Lee"),
        RosterImportRow("S2", "Ana", "Reyes", "B"),
    ]


def test_read_raises_without_required_columns(tmp_path):
    # given
    path = tmp_path / "roster.csv"
    path.write_text("Student Number,Email\nS1,jo@example.com\n")

    # when/then
    with pytest.raises(ValueError):
        classrecord.io.roster.read(path)


def test_read_raises_on_unsupported_file_type(tmp_path):
    # given
    path = tmp_path / "roster.txt"
    path.write_text("Student Number,Full Name\n")

    # when/then
    with pytest.raises(ValueError):
        classrecord.io.roster.read(path)


# import_roster ------------------------------------------------------------------------


def test_import_roster_numbers_rows_like_the_spreadsheet(tmp_path):
    # given
    path = tmp_path / "roster.csv"
    path.write_text(
        "Student Number,Full Name\n"
        "S1,\"Lee, Jo\"\n"
        "S1,\"Lee, Jo\"\n"
        "S2,Reyes Ana\n"
    )
    directory = Students([Student("S1", "Jo", "Lee", rfid="RF-1")])

    # when
    summary = classrecord.io.roster.import_roster(path, set(), directory.by_id)

    # then
    assert [o.row for o in summary.detailed_feedback] == [2, 3, 4]
    assert [o.status for o in summary.detailed_feedback] == [
        ImportStatus.IMPORTED,
        ImportStatus.SKIPPED,
        ImportStatus.ERROR,
    ]
    assert summary.to_dict()["imported"] == 1
