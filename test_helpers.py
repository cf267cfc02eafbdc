# test_helpers.py
# run as: pytest -q test_helpers.py
import numpy as np
import pandas as pd
import pytest

import backend
from helpers import describe_result, format_result, update_parsed_counts

X_SMALL = [1.0, 2.0, 3.0, 4.0, 5.0]
Y_SMALL = [1.1, 2.1, 2.9, 4.2, 4.8]


def test_parsed_counts_per_procedure():
    df = pd.DataFrame({"g1": ["1", "2", "3", None], "g2": ["4", "x", "6", "7"], "g3": ["1", "2", "3", "4"]})
    assert update_parsed_counts(df, "Two-sample TOST") == {"group1": 3, "group2": 3}
    assert update_parsed_counts(df, "Dependent correlations") == {"complete rows": 2, "variables": 3}
    assert update_parsed_counts(df, "Pairwise repeated measures") == {"complete rows": 2, "measures": 3}
    assert update_parsed_counts(df[["g1"]], "CI inclusion (two-sample)") is None
    assert update_parsed_counts(None, "Two-sample TOST") is None


def test_format_tost_report():
    res = backend.two_sample_tost(X_SMALL, Y_SMALL, ei=1.0, tr=0.2)
    text = format_result(res)
    assert text.startswith("---- Schuirmann-Yuen Test of the Equivalence of Two Independent Groups ----")
    assert "Trimmed Means: 3 3.067" in text
    assert "Decision: The null hypothesis" in text
    assert "Note: Winsorized variances are computed." in text


def test_format_tost_from_summary_has_no_trimmed_means():
    res = backend.tost_from_summary(0.0, 1.0, 30, 0.1, 1.2, 25, ei=0.5, varequal=True)
    assert "Trimmed Means: NA" in format_result(res)


def test_format_ci_report_shows_interval_level():
    res = backend.two_sample_tost_ci(X_SMALL, Y_SMALL, ei=1.0)
    text = format_result(res)
    assert "Confidence interval (90%)" in text
    assert "CI bounds are outside EI" in text
    assert "Note that this test provides the same result as TOST." in text


def test_format_pairwise_lists_every_contrast():
    e = np.array([0.1, -0.1, 0.2, -0.2, 0.05, -0.05, 0.15, -0.15, 0.0, 0.0])
    data = pd.DataFrame({"A": 5.0 + e, "B": 5.0 - e, "C": 8.0 + e})
    res = backend.pairwise_repeated_tost(data, ei=1.0)
    text = format_result(res)
    assert "A - B:" in text and "A - C:" in text and "B - C:" in text
    assert text.count("not equivalent") == 2
    assert text.endswith("Decision: No evidence for equivalence")

    summary = describe_result(res)
    assert "2 of 3 pairwise comparisons exceeded their bounds (A vs C, B vs C)" in summary
    assert summary.endswith("no evidence for equivalence.")


def test_describe_equivalent_two_sample():
    res = backend.two_sample_tost(X_SMALL, Y_SMALL, ei=2.5, varequal=True, normality=True)
    summary = describe_result(res)
    assert summary.startswith("Using the Schuirmann's Test of the Equivalence of Two Independent Groups")
    assert "difference between the means is between -2.5 and 2.5" in summary
    assert "df = 8" in summary


def test_describe_non_equivalent_correlations():
    res = backend.dependent_correlation_tost([0.6, 0.2, 0.3], ei=0.1, n=200)
    summary = describe_result(res)
    assert "equivalence test for two dependent correlations" in summary
    assert "lies outside ±0.1 cannot be rejected" in summary
    assert "df = 197" in summary


def test_describe_ci_reports_interval():
    res = backend.two_sample_tost_ci(X_SMALL, Y_SMALL, ei=2.5)
    summary = describe_result(res)
    assert "90% C.I. [" in summary
    assert "is between -2.5 and 2.5" in summary


@pytest.mark.parametrize("digits", [2, 6])
def test_format_respects_digits(digits):
    res = backend.two_sample_tost(X_SMALL, Y_SMALL, ei=1.0, varequal=True, normality=True)
    assert f"Means: {3.0:.{digits}g} {3.02:.{digits}g}" in format_result(res, digits=digits)
