import collections

import numpy as np
import pandas as pd
import pytest  # pyright: ignore

import classrecord


def test_map_percentages_to_numeric_grades_on_example():
    # given
    percentages = pd.Series(data=[98, 97.4, 86.5, 59.5, 59.4, np.nan])

    # when
    grades = classrecord.scales.map_percentages_to_numeric_grades(percentages)

    # then
    assert list(grades.iloc[:5]) == [1.00, 1.25, 1.75, 3.00, 5.00]
    assert pd.isna(grades.iloc[5])


def test_map_percentages_with_custom_scale():
    # given
    scale = collections.OrderedDict([(1.0, 90), (2.0, 75), (5.0, 0)])
    percentages = pd.Series(data=[91, 80, 10])

    # when
    grades = classrecord.scales.map_percentages_to_numeric_grades(percentages, scale)

    # then
    assert list(grades) == [1.0, 2.0, 5.0]


def test_map_percentages_raises_if_scale_not_decreasing():
    # given
    scale = collections.OrderedDict([(1.0, 75), (2.0, 90), (5.0, 0)])

    # when/then
    with pytest.raises(ValueError):
        classrecord.scales.map_percentages_to_numeric_grades(pd.Series([80]), scale)


def test_format_numeric_grade():
    assert classrecord.scales.format_numeric_grade(2.5) == "2.50"
    assert classrecord.scales.format_numeric_grade(np.nan) == "-"
