"""Charts of term grades."""

import numpy as np
import pandas as pd

import bokeh.models
import bokeh.plotting

from .scales import NUMERIC_SCALE, format_numeric_grade


def _plot_histogram(fig: bokeh.plotting.figure, x_hist: np.ndarray, y_hist: np.ndarray):
    fig.quad(top=y_hist, bottom=0, left=x_hist[:-1], right=x_hist[1:], fill_alpha=0.7)


def _plot_students(fig: bokeh.plotting.figure, percentages: pd.Series):
    source_df = percentages.rename("percentage").reset_index()
    source_df.columns = ["student", "percentage"]
    source_df["student"] = source_df["student"].astype(str)
    source = bokeh.models.ColumnDataSource(source_df)

    renderer = fig.scatter(
        "percentage",
        0,
        source=source,
        color="black",
        size=10,
        fill_alpha=0.2,
        marker="triangle",
    )
    fig.add_tools(
        bokeh.models.HoverTool(
            renderers=[renderer],
            tooltips=[("student", "@student"), ("percentage", "@percentage{0.00}")],
        )
    )


def _plot_thresholds(fig: bokeh.plotting.figure, scale, y_max: float):
    for grade, threshold in scale.items():
        fig.line([threshold, threshold], [0, y_max], line_dash="dashed", color="black")

    fig.xaxis.ticker = sorted(scale.values())
    fig.xaxis.major_label_overrides = {
        threshold: f"{format_numeric_grade(grade)} ({threshold})"
        for grade, threshold in scale.items()
    }


def grade_distribution(percentages: pd.Series, scale=None, bins=20):
    """Plot the distribution of term percentages.

    Parameters
    ----------
    percentages : pandas.Series
        Term percentages, indexed by student. Missing values are left out.
    scale : Optional[OrderedDict]
        Numeric grade thresholds drawn as dashed lines. Default:
        :attr:`classrecord.scales.NUMERIC_SCALE`.
    bins : int
        Number of histogram bins.

    Returns
    -------
    bokeh.plotting.figure
        Show it with :func:`bokeh.io.show`.

    """
    if scale is None:
        scale = NUMERIC_SCALE

    percentages = percentages.dropna()

    fig = bokeh.plotting.figure(
        width=800,
        height=400,
        x_range=(0, 100),
        title="Distribution of Term Percentages",
        x_axis_label="term percentage",
        y_axis_label="students",
    )

    y_hist, x_hist = np.histogram(percentages, bins=bins, range=(0, 100))
    _plot_histogram(fig, x_hist, y_hist)
    _plot_thresholds(fig, scale, max(1, y_hist.max(initial=0)))
    _plot_students(fig, percentages)
    return fig
