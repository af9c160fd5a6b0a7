"""Final grades, rankings and other statistics across terms."""

from __future__ import annotations

import typing

import numpy as np
import pandas as pd

from .core import GradingOptions, Term, TermGradebook
from .scales import map_percentages_to_numeric_grades

PASSED = "PASSED"
FAILED = "FAILED"


def _normalize_terms(term_percentages: pd.DataFrame) -> pd.DataFrame:
    """Relabel the columns as Term members, in chronological order."""
    table = term_percentages.copy()
    table.columns = [Term.parse(c) for c in table.columns]
    return table[sorted(table.columns)].astype(float)


def term_percentage_table(gradebooks: typing.Iterable[TermGradebook]) -> pd.DataFrame:
    """Combine the term percentages of several term gradebooks.

    Parameters
    ----------
    gradebooks : Iterable[TermGradebook]
        One gradebook per term, for the same course.

    Returns
    -------
    pandas.DataFrame
        One row per student and one column per term (labelled by
        :class:`Term`). Students missing from a term's gradebook get `NaN`.

    Raises
    ------
    ValueError
        If two gradebooks grade the same term.

    """
    columns = {}
    for gradebook in gradebooks:
        term = gradebook.config.term
        if term in columns:
            raise ValueError(f"Duplicate term: {term.value}.")
        columns[term] = gradebook.term_percentage

    if not columns:
        return pd.DataFrame(dtype=float)

    return pd.concat(columns, axis=1)[sorted(columns)]


def final_grades(term_percentages: pd.DataFrame, opts=None) -> pd.DataFrame:
    """Compute each student's final grade from their term percentages.

    Each term percentage is first converted to a numeric grade; the final
    numeric grade is the weighted sum of these, rounded to two decimals. A
    student who lacks a percentage for any weighted term has no final grade.

    Parameters
    ----------
    term_percentages : pandas.DataFrame
        One row per student, one column per term.
    opts : Optional[GradingOptions]
        The scale, term weights and passing grade to use.

    Returns
    -------
    pandas.DataFrame
        With columns ``percentage`` (weighted term percentage), ``numeric``
        (final numeric grade) and ``remarks`` (``"PASSED"`` if the numeric
        grade is at most the passing grade, else ``"FAILED"``). Students
        without a final grade have `NaN` values and `None` remarks.

    """
    opts = opts if opts is not None else GradingOptions()
    table = _normalize_terms(term_percentages)

    percentage = pd.Series(0.0, index=table.index)
    numeric = pd.Series(0.0, index=table.index)
    complete = pd.Series(True, index=table.index)

    for term, weight in opts.term_weights.items():
        term = Term.parse(term)
        if term not in table.columns:
            complete[:] = False
            continue
        column = table[term]
        complete &= column.notna()
        percentage += column.fillna(0) * weight
        numeric += (
            map_percentages_to_numeric_grades(column, opts.scale).fillna(0) * weight
        )

    numeric = numeric.round(2).where(complete)
    remarks = [
        None if not ok else (PASSED if n <= opts.passing_grade else FAILED)
        for n, ok in zip(numeric, complete)
    ]

    return pd.DataFrame(
        {
            "percentage": percentage.where(complete),
            "numeric": numeric,
            "remarks": pd.Series(remarks, index=table.index, dtype=object),
        },
        index=table.index,
    )


def rank(scores) -> pd.Series:
    """The rank of each student according to score.

    Parameters
    ----------
    scores : pd.Series
        A series containing overall scores.

    Returns
    -------
    pd.Series
        A Series of the same size as `scores` containing the integer rank of
        each student in the class. The best score is ranked 1.

    """
    sorted_scores = scores.sort_values(ascending=False, kind="stable").to_frame()
    sorted_scores["rank"] = np.arange(1, len(sorted_scores) + 1)
    return sorted_scores["rank"]


def _improvement(row: pd.Series) -> float:
    grades = row.dropna()
    if len(grades) < 2:
        return 0.0

    latest = grades.iloc[-1]
    previous = grades.iloc[:-1].mean()
    change = latest - previous

    if previous > 0:
        return float(change / previous * 100)
    elif change > 0:
        return float(change * 10)
    else:
        return 0.0


def improvement(term_percentages: pd.DataFrame) -> pd.Series:
    """How much each student's latest term improved on the earlier ones.

    The latest term with a percentage is compared with the mean of the
    earlier terms, as a percentage of that mean. If the mean is zero, ten
    times the absolute change is used. Students with fewer than two term
    percentages have an improvement of zero.

    """
    table = _normalize_terms(term_percentages)
    if table.empty:
        return pd.Series(0.0, index=table.index, name="improvement")
    return table.apply(_improvement, axis=1).rename("improvement")


def leaderboard(term_percentages: pd.DataFrame, opts=None) -> pd.DataFrame:
    """Rank students by their final grade.

    Parameters
    ----------
    term_percentages : pandas.DataFrame
        One row per student, one column per term.
    opts : Optional[GradingOptions]

    Returns
    -------
    pandas.DataFrame
        Sorted best first, with one column per term percentage, the final
        ``percentage``, ``numeric`` grade and ``remarks``, ``improvement``,
        ``is_improving`` and ``rank``. Students without a final grade have a
        ``percentage`` of zero and are ranked last.

    """
    opts = opts if opts is not None else GradingOptions()
    table = _normalize_terms(term_percentages)
    finals = final_grades(table, opts)

    board = table.copy()
    board.columns = [t.value for t in board.columns]
    board["percentage"] = finals["percentage"].fillna(0.0)
    board["numeric"] = finals["numeric"]
    board["remarks"] = finals["remarks"]
    board["improvement"] = improvement(table)
    board["is_improving"] = board["improvement"] > 0

    board = board.sort_values("percentage", ascending=False, kind="stable")
    board["rank"] = np.arange(1, len(board) + 1)
    return board
