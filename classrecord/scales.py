"""Mapping term percentages to numeric grades."""

import collections

import numpy as np
import pandas as pd


# helper functions =====================================================================


def _check_that_scale_monotonically_decreases(scale):
    prev = float("inf")
    for threshold in scale.values():
        if threshold >= prev:
            raise ValueError("Scale is not monotonically decreasing.")
        prev = threshold


# common scales ========================================================================

NUMERIC_SCALE = collections.OrderedDict(
    [
        (1.00, 97.5),
        (1.25, 94.5),
        (1.50, 91.5),
        (1.75, 86.5),
        (2.00, 81.5),
        (2.25, 76.0),
        (2.50, 70.5),
        (2.75, 65.0),
        (3.00, 59.5),
        (5.00, 0),
    ]
)
"""The default scale: numeric grades and the minimum percentage for each."""

FAILING_GRADE = 5.00

#: the worst numeric grade that still passes
PASSING_GRADE = 3.00


# public functions =====================================================================


def numeric_grade(percentage, scale=None):
    """Map a single percentage to a numeric grade.

    Returns `NaN` if the percentage is missing.

    """
    if scale is None:
        scale = NUMERIC_SCALE

    if percentage is None or pd.isna(percentage):
        return np.nan

    for grade, threshold in scale.items():
        if percentage >= threshold:
            return grade
    else:
        return FAILING_GRADE


def map_percentages_to_numeric_grades(percentages, scale=None):
    """Map each term percentage to a numeric grade.

    Parameters
    ----------
    percentages : pandas.Series
        A series of percentages between 0 and 100. Missing values stay
        missing.
    scale : OrderedDict
        An ordered dictionary mapping numeric grades to their minimum
        percentages, best grade first. Default: :attr:`NUMERIC_SCALE`.

    Returns
    -------
    pandas.Series
        A series containing the resulting numeric grades.

    Raises
    ------
    ValueError
        If the provided scale's thresholds do not decrease.

    """
    if scale is None:
        scale = NUMERIC_SCALE
    else:
        _check_that_scale_monotonically_decreases(scale)

    return percentages.apply(lambda p: numeric_grade(p, scale)).astype(float)


def format_numeric_grade(grade) -> str:
    """Format a numeric grade with two decimals, e.g. ``"2.50"``; ``"-"`` if missing."""
    if grade is None or pd.isna(grade):
        return "-"
    return f"{grade:.2f}"
