import numpy as np
import pandas as pd
import pytest  # pyright: ignore

import classrecord
from classrecord import Term
from classrecord.statistics import (
    final_grades,
    improvement,
    leaderboard,
    rank,
    term_percentage_table,
)


def _example_term_percentages():
    return pd.DataFrame(
        {
            "PRELIM": [98, 80, 50],
            "MIDTERM": [98, 85, np.nan],
            "PREFINALS": [98, 90, 60],
            "FINALS": [98, 60, 70],
        },
        index=["S1", "S2", "S3"],
    )


# final_grades -------------------------------------------------------------------------


def test_final_grades_weighs_numeric_grades_of_each_term():
    # when
    finals = final_grades(_example_term_percentages())

    # then
    # S2: 2.25 * .2 + 2.00 * .2 + 1.75 * .2 + 3.00 * .4
    assert finals.loc["S2", "numeric"] == pytest.approx(2.4)
    assert finals.loc["S2", "percentage"] == pytest.approx(75)
    assert finals.loc["S2", "remarks"] == "PASSED"
    assert finals.loc["S1", "numeric"] == pytest.approx(1.0)


def test_final_grades_is_missing_without_every_term():
    # when
    finals = final_grades(_example_term_percentages())

    # then
    assert np.isnan(finals.loc["S3", "numeric"])
    assert np.isnan(finals.loc["S3", "percentage"])
    assert finals.loc["S3", "remarks"] is None


def test_final_grades_fail_above_passing_grade():
    # given
    table = pd.DataFrame(
        {"PRELIM": [50], "MIDTERM": [50], "PREFINALS": [50], "FINALS": [50]},
        index=["S1"],
    )

    # when
    finals = final_grades(table)

    # then
    assert finals.loc["S1", "numeric"] == pytest.approx(5.0)
    assert finals.loc["S1", "remarks"] == "FAILED"


def test_final_grade_of_exactly_passing_grade_passes():
    # given
    table = pd.DataFrame(
        {"PRELIM": [60], "MIDTERM": [60], "PREFINALS": [60], "FINALS": [60]},
        index=["S1"],
    )

    # when
    finals = final_grades(table)

    # then
    assert finals.loc["S1", "numeric"] == 3.0
    assert finals.loc["S1", "remarks"] == "PASSED"


# rank / improvement -------------------------------------------------------------------


def test_rank_orders_best_first():
    # given
    scores = pd.Series([70, 90, 80], index=["S1", "S2", "S3"])

    # when
    ranks = rank(scores)

    # then
    assert ranks.loc["S2"] == 1
    assert ranks.loc["S3"] == 2
    assert ranks.loc["S1"] == 3


def test_improvement_compares_latest_term_to_mean_of_earlier_terms():
    # when
    result = improvement(_example_term_percentages())

    # then
    assert result.loc["S1"] == pytest.approx(0)
    # latest 60 vs mean(80, 85, 90) == 85
    assert result.loc["S2"] == pytest.approx((60 - 85) / 85 * 100)
    # midterm is missing: latest 70 vs mean(50, 60) == 55
    assert result.loc["S3"] == pytest.approx((70 - 55) / 55 * 100)


def test_improvement_is_zero_with_fewer_than_two_terms():
    # given
    table = pd.DataFrame({"PRELIM": [80], "MIDTERM": [np.nan]}, index=["S1"])

    # then
    assert improvement(table).loc["S1"] == 0


# leaderboard --------------------------------------------------------------------------


def test_leaderboard_ranks_by_final_percentage():
    # when
    board = leaderboard(_example_term_percentages())

    # then
    assert list(board.index) == ["S1", "S2", "S3"]
    assert list(board["rank"]) == [1, 2, 3]
    assert board.loc["S3", "percentage"] == 0
    assert not board.loc["S2", "is_improving"]
    assert board.loc["S3", "is_improving"]


# term_percentage_table ----------------------------------------------------------------


def test_term_percentage_table_combines_gradebooks():
    # given
    gradebooks = []
    for term in [Term.FINALS, Term.PRELIM]:
        config = classrecord.TermWeightConfig(term, 0, 0, 100)
        exam = classrecord.Assessment(f"{term.value}-exam", term, "EXAM", 100)
        scores = [classrecord.AssessmentScore("S1", exam.id, 90)]
        gradebooks.append(classrecord.TermGradebook(config, [exam], scores))

    # when
    table = term_percentage_table(gradebooks)

    # then
    assert list(table.columns) == [Term.PRELIM, Term.FINALS]
    assert table.loc["S1", Term.FINALS] == pytest.approx(90)


def test_term_percentage_table_raises_on_duplicate_terms():
    # given
    config = classrecord.TermWeightConfig(Term.PRELIM, 0, 0, 100)
    gradebook = classrecord.TermGradebook(config, [], [])

    # when/then
    with pytest.raises(ValueError):
        term_percentage_table([gradebook, gradebook])
