# backend.py
"""
Backend computations for equivalence testing.

This module provides:
- Robust estimators (`trimmed_mean`, `winsorized_variance`)
- Pairwise contrast construction for k repeated measures
- Two independent groups TOST under three regimes
  (Schuirmann, Schuirmann-Welch, Schuirmann-Yuen), from raw data or summaries
- Confidence-interval inclusion test for two independent groups
- Equivalence test for two dependent (overlapping) correlations
- Pairwise repeated-measures equivalence test (unstandardized metric)

Every procedure is a pure function returning an immutable record from
`results`; nothing here prints. Docstrings in this file follow the NumPy
documentation style.
"""

from itertools import combinations
from typing import List, Optional, Sequence, Tuple
import math

import numpy as np
import pandas as pd
from scipy.stats import t as t_dist

from errors import (
    InsufficientDataError,
    InvalidCorrelationError,
    InvalidEquivalenceIntervalError,
    InvalidInputTypeError,
    MissingDataError,
    MissingSampleSizeError,
)
from results import (
    CI_DECISION_TEXT,
    CORRELATION_DECISION_TEXT,
    MEANS_DECISION_TEXT,
    PAIRWISE_DECISION_TEXT,
    ContrastOutcome,
    Decision,
    DependentCorrelationResult,
    PairwiseResult,
    Regime,
    TostCIResult,
    TostResult,
)


REGIME_TITLES = {
    Regime.EQUAL_VARIANCE_NORMAL: "Schuirmann's Test of the Equivalence of Two Independent Groups",
    Regime.UNEQUAL_VARIANCE_NORMAL: "Schuirmann-Welch Test of the Equivalence of Two Independent Groups",
    Regime.ROBUST_TRIMMED: "Schuirmann-Yuen Test of the Equivalence of Two Independent Groups",
}

ZERO_SE_WARNING = (
    "Warning: The standard error is zero (constant samples). Test statistics "
    "and p-values are degenerate; check the input data."
)

ZERO_SE_UNDEFINED_WARNING = (
    "Warning: The standard error is zero (constant samples) and the Satterthwaite "
    "degrees of freedom are undefined (0/0). p-values are undefined (NaN) for this "
    "regime, so equivalence cannot be concluded; check the input data."
)


def _zero_se_warning(df: float) -> str:
    return ZERO_SE_UNDEFINED_WARNING if math.isnan(df) else ZERO_SE_WARNING


# -------------------------
# Input checks
# -------------------------
def _check_ei(ei) -> float:
    """Return `ei` as a float, or raise if it is not finite and strictly positive."""
    try:
        value = float(ei)
    except (TypeError, ValueError) as e:
        raise InvalidEquivalenceIntervalError(f"Equivalence interval must be a number (got {ei!r}).") from e
    if not math.isfinite(value) or value <= 0:
        raise InvalidEquivalenceIntervalError(
            f"Equivalence interval must be finite and > 0 (got {value}). "
            "An interval of 0 reduces the test to a point-null test."
        )
    return value


def _check_alpha(alpha, upper: float = 1.0) -> float:
    value = float(alpha)
    if not (0.0 < value < upper):
        raise ValueError(f"alpha must be in (0, {upper}) (got {value}).")
    return value


def _as_float_array(arr_like, label: str) -> np.ndarray:
    """Convert a 1-D array-like to float64, mapping None/NA to NaN and rejecting non-numeric values."""
    raw = np.asarray(arr_like, dtype=object)
    if raw.ndim > 1:
        raise InvalidInputTypeError(f"{label} must be one-dimensional (got shape {raw.shape}).")
    try:
        s = pd.to_numeric(pd.Series(raw.ravel()), errors="raise")
    except (TypeError, ValueError) as e:
        raise InvalidInputTypeError(f"{label} must contain numeric values only.") from e
    return s.to_numpy(dtype=float, na_value=np.nan)


def _clean_sample(arr_like, na_rm: bool, label: str) -> np.ndarray:
    """
    Convert a sample to a 1-D float array, handling missing values.

    Parameters
    ----------
    arr_like : array-like
        Raw sample values.
    na_rm : bool
        If True, missing values are dropped; otherwise their presence is an error.
    label : str
        Name used in error messages.

    Raises
    ------
    MissingDataError
        If missing values are present and `na_rm` is False.
    """
    a = _as_float_array(arr_like, label)
    missing = np.isnan(a)
    n_missing = int(missing.sum())
    if n_missing:
        if not na_rm:
            raise MissingDataError(
                f"There are missing values in {label} ({n_missing}). Set na_rm=True to drop them.",
                n_missing=n_missing,
            )
        a = a[~missing]
    return a


def _require_size(a: np.ndarray, required: int, label: str) -> None:
    if a.size < required:
        raise InsufficientDataError(
            f"{label} needs at least {required} non-missing observations (got {a.size}).",
            n=int(a.size),
            required=required,
        )


# -------------------------
# Robust estimators
# -------------------------
def _check_tr(tr) -> float:
    value = float(tr)
    if not (0.0 <= value < 0.5):
        raise ValueError(f"Trim proportion tr must be in [0, 0.5) (got {tr}).")
    return value


def _trim_count(n: int, tr: float) -> Tuple[int, int]:
    """Return (g, h): observations cut from each tail and the effective size left."""
    tr = _check_tr(tr)
    g =int(math.floor(tr * n))
    h = n - 2 * g
    if h < 2:
        raise InsufficientDataError(
            f"Trimming {tr:g} from each tail of {n} observations leaves {h}; at least 2 are required.",
            n=h,
            required=2,
        )
    return g, h


def _complete(arr_like, label: str = "sample") -> np.ndarray:
    return _clean_sample(arr_like, na_rm=False, label=label)


def trimmed_mean(arr_like, tr: float = 0.2) -> float:
    """
    Trimmed mean: drop floor(tr * n) values from each tail and average the rest.

    With ``tr == 0`` this is exactly ``np.mean`` of the sample.

    Raises
    ------
    MissingDataError
        If the sample contains missing values.
    InsufficientDataError
        If fewer than 2 observations remain after trimming.
    """
    a = _complete(arr_like)
    g, _ = _trim_count(a.size, tr)
    if g == 0:
        return float(np.mean(a))
    s = np.sort(a)
    return float(np.mean(s[g:a.size - g]))


def winsorized_variance(arr_like, tr: float = 0.2) -> float:
    """
    Winsorized variance (ddof=1).

    The floor(tr * n) smallest values are replaced with the smallest retained
    value and the floor(tr * n) largest with the largest retained value. With
    ``tr == 0`` this is exactly ``np.var(x, ddof=1)``.
    """
    a = _complete(arr_like)
    g, _ = _trim_count(a.size, tr)
    if g == 0:
        return float(np.var(a, ddof=1))
    s = np.sort(a)
    w = np.clip(s, s[g], s[a.size - g - 1])
    return float(np.var(w, ddof=1))


def summarize(arr_like) -> Tuple[float, float, int]:
    """
    Mean, sample standard deviation (ddof=1) and size of a complete sample.

    Raises
    ------
    InsufficientDataError
        If there are fewer than 2 observations.
    """
    a = _complete(arr_like)
    _require_size(a, 2, "sample")
    return float(np.mean(a)), float(np.std(a, ddof=1)), int(a.size)


# -------------------------
# Contrasts
# -------------------------
def contrast_pairs(k: int) -> List[Tuple[int, int]]:
    """Zero-based (i, j) pairs, i < j, in the row order of `get_contrasts`."""
    if int(k) != k or k < 2:
        raise InvalidInputTypeError(f"At least 2 repeated measures are required (got k={k}).")
    return list(combinations(range(int(k)), 2))


def get_contrasts(k: int, kind: str = "allPW") -> np.ndarray:
    """
    Contrast matrix for k repeated measures.

    Parameters
    ----------
    k : int
        Number of repeated measures (>= 2).
    kind : str, optional
        Contrast family. Only "allPW" (all pairwise) is available.

    Returns
    -------
    numpy.ndarray
        Integer matrix of shape (k * (k - 1) / 2, k). Row r compares measures
        (i, j) = contrast_pairs(k)[r] with +1 at i and -1 at j.
    """
    if kind != "allPW":
        raise ValueError(f"Unknown contrast type {kind!r}; only 'allPW' is available.")
    pairs = contrast_pairs(k)
    contrasts = np.zeros((len(pairs), int(k)), dtype=int)
    for row, (i, j) in enumerate(pairs):
        contrasts[row, i] = 1
        contrasts[row, j] = -1
    return contrasts


def pairwise_mean_diffs(means, contrasts) -> np.ndarray:
    """Mean difference for each contrast row (contrast . means)."""
    return np.asarray(contrasts, dtype=float) @ np.asarray(means, dtype=float).ravel()


def pairwise_sd(contrasts, sigma) -> np.ndarray:
    """Standard deviation of each contrast: sqrt(c' Sigma c)."""
    c = np.asarray(contrasts, dtype=float)
    s = np.asarray(sigma, dtype=float)
    var = np.einsum("ij,jk,ik->i", c, s, c)
    # rounding can push the variance of an exactly constant difference below zero
    return np.sqrt(np.maximum(var, 0.0))


# -------------------------
# TOST engine
# -------------------------
def select_regime(varequal: bool = False, normality: bool = False) -> Regime:
    """Pick the TOST regime; `varequal` only matters when normality is assumed."""
    if not normality:
        return Regime.ROBUST_TRIMMED
    if varequal:
        return Regime.EQUAL_VARIANCE_NORMAL
    return Regime.UNEQUAL_VARIANCE_NORMAL


def _satterthwaite_df(v1: float, v2: float, d1: float, d2: float) -> float:
    """Welch-Satterthwaite df for two variance components with d1, d2 degrees of freedom."""
    num = (v1 + v2) ** 2
    den = v1 ** 2 / d1 + v2 ** 2 / d2
    if den == 0:
        return float("nan")
    return float(num / den)


def _pooled_se_df(s1: float, n1: int, s2: float, n2: int) -> Tuple[float, float]:
    df = n1 + n2 - 2
    pooled_var = ((n1 - 1) * s1 ** 2 + (n2 - 1) * s2 ** 2) / df
    se = np.sqrt(pooled_var * (1.0 / n1 + 1.0 / n2))
    return float(se), float(df)


def _welch_se_df(s1: float, n1: int, s2: float, n2: int) -> Tuple[float, float]:
    v1 = s1 ** 2 / n1
    v2 = s2 ** 2 / n2
    return float(np.sqrt(v1 + v2)), _satterthwaite_df(v1, v2, n1 - 1, n2 - 1)


def _yuen_se_df(a: np.ndarray, b: np.ndarray, tr: float) -> Tuple[float, float]:
    _, h1 = _trim_count(a.size, tr)
    _, h2 = _trim_count(b.size, tr)
    q1 = (a.size - 1) * winsorized_variance(a, tr) / (h1 * (h1 - 1))
    q2 = (b.size - 1) * winsorized_variance(b, tr) / (h2 * (h2 - 1))
    return float(np.sqrt(q1 + q2)), _satterthwaite_df(q1, q2, h1 - 1, h2 - 1)


def _one_sided_tests(diff: float, ei: float, se: float, df: float) -> Tuple[float, float, float, float]:
    """
    The two one-sided t-tests against [-ei, ei].

    Returns
    -------
    t1, t2, p1, p2 : float
        t1 = (diff - ei) / se with p1 = P(T <= t1);
        t2 = (diff + ei) / se with p2 = P(T >= t2).
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        t1 = np.float64(diff - ei) / np.float64(se)
        t2 = np.float64(diff + ei) / np.float64(se)
    p1 = float(t_dist.cdf(t1, df))
    p2 = float(t_dist.sf(t2, df))
    return float(t1), float(t2), p1, p2


def _tost_decision(p1: float, p2: float, alpha: float) -> Decision:
    return Decision.from_flag(p1 <= alpha and p2 <= alpha)


def tost_from_summary(m1: float, s1: float, n1: int, m2: float, s2: float, n2: int,
                      ei: float, alpha: float = 0.05, varequal: bool = False) -> TostResult:
    """
    Two-group TOST from summary statistics (normal regimes only).

    Parameters
    ----------
    m1, s1, n1 : float, float, int
        Mean, sample sd and size of group 1.
    m2, s2, n2 : float, float, int
        Mean, sample sd and size of group 2.
    ei : float
        Half-width of the symmetric equivalence interval [-ei, ei].
    alpha : float, optional
        Type-I error rate, by default 0.05.
    varequal : bool, optional
        Pooled-variance Schuirmann test if True, Schuirmann-Welch otherwise.

    Returns
    -------
    TostResult
        `trimmed_means` is None since raw data are not available.
    """
    ei = _check_ei(ei)
    alpha = _check_alpha(alpha)
    n1, n2 = int(n1), int(n2)
    if n1 < 2 or n2 < 2:
        raise InsufficientDataError(
            f"Both groups need at least 2 observations (got n1={n1}, n2={n2}).", n=min(n1, n2), required=2
        )
    if s1 < 0 or s2 < 0:
        raise ValueError("Standard deviations must be non-negative.")
    regime = select_regime(varequal=varequal, normality=True)
    if regime is Regime.EQUAL_VARIANCE_NORMAL:
        se, df = _pooled_se_df(s1, n1, s2, n2)
    else:
        se, df = _welch_se_df(s1, n1, s2, n2)
    diff = float(m1) - float(m2)
    warnings = [_zero_se_warning(df)] if se == 0 else []
    return _tost_result(regime, (float(m1), float(m2)), None, (float(s1), float(s2)), (n1, n2),
                        ei, alpha, 0.0, diff, se, df, warnings)


def _tost_result(regime, means, trimmed_means, sds, ns, ei, alpha, tr, diff, se, df, warnings) -> TostResult:
    t1, t2, p1, p2 = _one_sided_tests(diff, ei, se, df)
    decision = _tost_decision(p1, p2, alpha)
    return TostResult(
        title=REGIME_TITLES[regime],
        regime=regime,
        means=means,
        trimmed_means=trimmed_means,
        sds=sds,
        ns=ns,
        ei=ei,
        alpha=alpha,
        tr=float(tr),
        mean_diff=float(diff),
        se=float(se),
        df=float(df),
        t1=t1,
        t2=t2,
        p1=p1,
        p2=p2,
        decision=decision,
        decision_text=MEANS_DECISION_TEXT[decision],
        warnings=tuple(warnings),
    )


def two_sample_tost(x, y, ei: float, varequal: bool = False, normality: bool = False,
                    tr: float = 0.2, alpha: float = 0.05, na_rm: bool = True,
                    regime: Optional[Regime] = None) -> TostResult:
    """
    Robust and non-robust TOST for two independent groups.

    The regime is chosen once from (`normality`, `varequal`) unless given
    explicitly: Schuirmann (equal variances, normal), Schuirmann-Welch
    (unequal variances, normal) or Schuirmann-Yuen (trimmed means and
    Winsorized variances; the default, as normality is not assumed).

    Parameters
    ----------
    x, y : array-like
        Samples for group 1 and group 2.
    ei : float
        Half-width of the symmetric equivalence interval [-ei, ei].
    varequal : bool, optional
        Assume equal variances. Only used when `normality` is True.
    normality : bool, optional
        Assume normally distributed groups.
    tr : float, optional
        Proportion trimmed from each tail for the Yuen regime, by default 0.2.
    alpha : float, optional
        Type-I error rate, by default 0.05.
    na_rm : bool, optional
        Drop missing values (default). If False, missing values raise.
    regime : Regime, optional
        Explicit regime, overriding `varequal` and `normality`.

    Returns
    -------
    TostResult

    Raises
    ------
    MissingDataError
        Missing values present and `na_rm` is False.
    InsufficientDataError
        A group has fewer than 2 observations, or trimming leaves fewer than 2.
    InvalidEquivalenceIntervalError
        `ei` is not finite and > 0.
    """
    ei = _check_ei(ei)
    alpha = _check_alpha(alpha)
    tr = _check_tr(tr)
    regime = select_regime(varequal, normality) if regime is None else Regime(regime)
    a = _clean_sample(x, na_rm, "x")
    b = _clean_sample(y, na_rm, "y")
    _require_size(a, 2, "x")
    _require_size(b, 2, "y")

    warnings = []
    m1, s1, n1 = summarize(a)
    m2, s2, n2 = summarize(b)

    if regime is Regime.ROBUST_TRIMMED:
        if varequal:
            warnings.append("varequal is ignored because normality is not assumed.")
        warnings.append("Winsorized variances are computed.")
        trimmed = (trimmed_mean(a, tr), trimmed_mean(b, tr))
        se, df = _yuen_se_df(a, b, tr)
        diff = trimmed[0] - trimmed[1]
    else:
        try:
            trimmed = (trimmed_mean(a, tr), trimmed_mean(b, tr))
        except InsufficientDataError as e:
            trimmed = None
            warnings.append(f"Trimmed means not reported: {e}")
        if regime is Regime.EQUAL_VARIANCE_NORMAL:
            se, df = _pooled_se_df(s1, n1, s2, n2)
        else:
            se, df = _welch_se_df(s1, n1, s2, n2)
        diff = m1 - m2

    if se == 0:
        warnings.append(_zero_se_warning(df))
    return _tost_result(regime, (m1, m2), trimmed, (s1, s2), (n1, n2), ei, alpha, tr, diff, se, df, warnings)


# -------------------------
# Confidence-interval inclusion
# -------------------------
def two_sample_tost_ci(x, y, ei: float, alpha: float = 0.05, na_rm: bool = False) -> TostCIResult:
    """
    Independent-samples equivalence test by confidence-interval inclusion.

    Uses the pooled (equal-variance) standard error with df = nx + ny - 2.
    Equivalence is concluded when the (1 - 2 * alpha) confidence interval for
    the mean difference lies strictly inside (-ei, ei). The one-sided tests
    are reported alongside; away from the boundary both decisions agree.

    Parameters
    ----------
    x, y : array-like
        Samples for group 1 and group 2.
    ei : float
        Half-width of the equivalence interval.
    alpha : float, optional
        Type-I error rate in (0, 0.5), by default 0.05.
    na_rm : bool, optional
        Drop missing values. Defaults to False, so missing values raise.

    Returns
    -------
    TostCIResult
    """
    ei = _check_ei(ei)
    alpha = _check_alpha(alpha, upper=0.5)
    a = _clean_sample(x, na_rm, "x")
    b = _clean_sample(y, na_rm, "y")
    _require_size(a, 2, "x")
    _require_size(b, 2, "y")

    m1, s1, n1 = summarize(a)
    m2, s2, n2 = summarize(b)
    se, df = _pooled_se_df(s1, n1, s2, n2)
    diff = m1 - m2
    t1, t2, p1, p2 = _one_sided_tests(diff, ei, se, df)
    tost_decision = _tost_decision(p1, p2, alpha)

    # a two-sided (1 - 2 alpha) interval cuts alpha from each tail
    conf_level = 1.0 - 2.0 * alpha
    t_crit = float(t_dist.ppf(1.0 - alpha, df))
    ci_lower = diff - t_crit * se
    ci_upper = diff + t_crit * se
    decision = Decision.from_flag(ci_lower > -ei and ci_upper < ei)

    return TostCIResult(
        means=(m1, m2),
        sds=(s1, s2),
        ns=(n1, n2),
        mean_diff=diff,
        ei=ei,
        alpha=alpha,
        se=se,
        df=df,
        t1=t1,
        t2=t2,
        p1=p1,
        p2=p2,
        tost_decision=tost_decision,
        tost_decision_text=MEANS_DECISION_TEXT[tost_decision],
        conf_level=conf_level,
        t_crit=t_crit,
        ci_lower=float(ci_lower),
        ci_upper=float(ci_upper),
        decision=decision,
        decision_text=CI_DECISION_TEXT[decision],
        warnings=(ZERO_SE_WARNING,) if se == 0 else (),
    )


# =============================================================================
# DEPENDENT CORRELATIONS
# =============================================================================

def _check_correlations(r12: float, r13: float, r23: float) -> float:
    """Validate a correlation triple and return the determinant of its 3x3 matrix."""
    rs = np.array([r12, r13, r23], dtype=float)
    if not np.all(np.isfinite(rs)):
        raise InvalidCorrelationError("Correlations must be finite (a variable may have zero variance).")
    if np.any(np.abs(rs) > 1.0):
        raise InvalidCorrelationError(f"Correlations must lie in [-1, 1] (got {tuple(rs.tolist())}).")
    det = 1.0 - r12 ** 2 - r13 ** 2 - r23 ** 2 + 2.0 * r12 * r13 * r23
    if det < -1e-12:
        raise InvalidCorrelationError(
            f"Correlations (r12={r12:g}, r13={r13:g}, r23={r23:g}) do not form a positive "
            f"semi-definite correlation matrix (determinant {det:.3g})."
        )
    if r23 <= -1.0:
        raise InvalidCorrelationError("r23 = -1 leaves the standard error of r12 - r13 undefined.")
    return max(det, 0.0)


def dependent_correlation_se(r12: float, r13: float, r23: float, n: int) -> float:
    """
    Standard error of r12 - r13 for correlations sharing variable 1.

    Williams' modification of Hotelling's test (Williams, 1959; Steiger, 1980):

        |R|  = 1 - r12^2 - r13^2 - r23^2 + 2 r12 r13 r23
        rbar = (r12 + r13) / 2
        SE^2 = (2 (n-1)/(n-3) |R| + rbar^2 (1 - r23)^3) / ((n-1) (1 + r23))

    With r12 = r13 = r23 = 0 this equals 2 / (n - 3).

    Parameters
    ----------
    r12, r13, r23 : float
        Correlations; variable 1 is shared between r12 and r13.
    n : int
        Sample size (> 3).
    """
    n = _check_correlation_n(n)
    det = _check_correlations(r12, r13, r23)
    return _williams_se(r12, r13, r23, n, det)


def _check_correlation_n(n) -> int:
    n = int(n)
    if n <= 3:
        raise InsufficientDataError(f"Sample size must exceed 3 (got {n}).", n=n, required=4)
    return n


def _williams_se(r12: float, r13: float, r23: float, n: int, det: float) -> float:
    rbar = (r12 + r13) / 2.0
    num = 2.0 * (n - 1) / (n - 3) * det + rbar ** 2 * (1.0 - r23) ** 3
    den = (n - 1) * (1.0 + r23)
    return float(np.sqrt(num / den))


def _correlation_input(dat, n: Optional[int], na_rm: bool):
    """Return (r12, r13, r23, n, source, warnings) from raw data or a correlation vector."""
    if isinstance(dat, pd.DataFrame):
        try:
            arr = dat.apply(pd.to_numeric, errors="raise").to_numpy(dtype=float, na_value=np.nan)
        except (TypeError, ValueError) as e:
            raise InvalidInputTypeError("Correlation data must contain numeric values only.") from e
    else:
        try:
            arr = np.asarray(dat, dtype=float)
        except (TypeError, ValueError) as e:
            raise InvalidInputTypeError("Correlation data must be numeric.") from e

    warnings = []
    if arr.shape in ((3,), (1, 3)):
        if n is None:
            raise MissingSampleSizeError(
                "A vector of correlations (r12, r13, r23) requires the sample size n."
            )
        r12, r13, r23 = (float(v) for v in arr.ravel())
        return r12, r13, r23, int(n), "correlations", warnings

    if arr.ndim != 2 or arr.shape[1] != 3:
        raise InvalidInputTypeError(
            f"Expected an N x 3 data matrix or a vector of 3 correlations (got shape {arr.shape})."
        )
    incomplete = np.isnan(arr).any(axis=1)
    if incomplete.any():
        if not na_rm:
            raise MissingDataError(
                f"There are missing values in {int(incomplete.sum())} row(s). Set na_rm=True to drop them.",
                n_missing=int(np.isnan(arr).sum()),
            )
        arr = arr[~incomplete]
    if n is not None and int(n) != arr.shape[0]:
        warnings.append(f"n={n} ignored; the sample size of the raw data ({arr.shape[0]}) is used.")
    if arr.shape[0] <= 3:
        raise InsufficientDataError(
            f"At least 4 complete rows are required (got {arr.shape[0]}).", n=arr.shape[0], required=4
        )
    with np.errstate(divide="ignore", invalid="ignore"):
        r = np.corrcoef(arr, rowvar=False)
    return float(r[0, 1]), float(r[0, 2]), float(r[1, 2]), int(arr.shape[0]), "raw", warnings


def dependent_correlation_tost(dat, ei: float, n: Optional[int] = None, alpha: float = 0.05,
                               na_rm: bool = True) -> DependentCorrelationResult:
    """
    Equivalence test for two dependent correlations with one variable in common.

    Tests whether r12 - r13 lies within [-ei, ei] using two one-sided t-tests
    with Williams' standard error and df = n - 3.

    Parameters
    ----------
    dat : array-like or pandas.DataFrame
        Either an N x 3 matrix of raw data (column 1 is the shared variable),
        or a vector of the three correlations (r12, r13, r23).
    ei : float
        Half-width of the equivalence interval on the correlation scale.
    n : int, optional
        Sample size; required when `dat` is a vector of correlations.
    alpha : float, optional
        Type-I error rate, by default 0.05.
    na_rm : bool, optional
        Delete rows with missing values from raw data (default).

    Returns
    -------
    DependentCorrelationResult

    Raises
    ------
    MissingSampleSizeError
        `dat` is a vector of correlations and `n` is not given.
    InvalidInputTypeError
        `dat` is neither N x 3 nor a vector of 3 correlations.
    InvalidCorrelationError
        Correlations are out of range or inconsistent.
    """
    ei = _check_ei(ei)
    alpha = _check_alpha(alpha)
    r12, r13, r23, n_used, source, warnings = _correlation_input(dat, n, na_rm)
    n_used = _check_correlation_n(n_used)
    det = _check_correlations(r12, r13, r23)
    se = _williams_se(r12, r13, r23, n_used, det)
    df = float(n_used - 3)
    diff = r12 - r13
    t1, t2, p1, p2 = _one_sided_tests(diff, ei, se, df)
    decision = _tost_decision(p1, p2, alpha)
    if se == 0:
        warnings.append(ZERO_SE_WARNING)
    return DependentCorrelationResult(
        r12=r12,
        r13=r13,
        r23=r23,
        n=n_used,
        corr_diff=diff,
        ei=ei,
        alpha=alpha,
        determinant=det,
        se=se,
        df=df,
        t1=t1,
        t2=t2,
        p1=p1,
        p2=p2,
        decision=decision,
        decision_text=CORRELATION_DECISION_TEXT[decision],
        source=source,
        warnings=tuple(warnings),
    )


# =============================================================================
# REPEATED MEASURES
# =============================================================================

def pairwise_repeated_tost(data: pd.DataFrame, ei: float, repeated: Optional[Sequence[str]] = None,
                           alpha: float = 0.05, na_rm: bool = True) -> PairwiseResult:
    """
    Pairwise equivalence of k repeated measures (unstandardized metric).

    For every pair (i, j) the mean difference must satisfy

        |mean_i - mean_j| <= ei - (sd_ij / sqrt(n)) * t(1 - alpha, n - 1)

    where sd_ij is the standard deviation of the paired difference. If any
    pair fails, the omnibus test fails; no multiplicity correction is applied.

    Reference: Mara, C. A., & Cribbie, R. A. (2012). Paired-samples tests of
    equivalence. Communications in Statistics - Simulation and Computation.

    Parameters
    ----------
    data : pandas.DataFrame
        One row per unit, one column per repeated measure.
    ei : float
        Equivalence interval in the units of the measures.
    repeated : sequence of str, optional
        Columns holding the repeated measures; all columns by default.
    alpha : float, optional
        Type-I error rate, by default 0.05.
    na_rm : bool, optional
        Delete rows with any missing value (default). If False, missing
        values raise.

    Returns
    -------
    PairwiseResult
    """
    if not isinstance(data, pd.DataFrame):
        raise InvalidInputTypeError("Data input is not a DataFrame.")
    ei = _check_ei(ei)
    alpha = _check_alpha(alpha)
    columns = list(data.columns) if repeated is None else list(repeated)
    absent = [c for c in columns if c not in data.columns]
    if absent:
        raise InvalidInputTypeError(f"Repeated-measures columns not found in data: {absent}.")
    k = len(columns)
    contrasts = get_contrasts(k)

    try:
        frame = data[columns].apply(pd.to_numeric, errors="raise")
    except (TypeError, ValueError) as e:
        raise InvalidInputTypeError("Repeated-measures columns must contain numeric values only.") from e
    incomplete = frame.isna().any(axis=1)
    if incomplete.any():
        if not na_rm:
            raise MissingDataError(
                f"There are missing values in {int(incomplete.sum())} row(s). Set na_rm=True to drop them.",
                n_missing=int(frame.isna().to_numpy().sum()),
            )
        frame = frame.loc[~incomplete]
    n = int(frame.shape[0])
    if n < 2:
        raise InsufficientDataError(f"At least 2 complete rows are required (got {n}).", n=n, required=2)

    warnings = []
    if n < k + 1:
        warnings.append(
            f"Warning: n = {n} is smaller than k + 1 = {k + 1}; the covariance matrix is singular."
        )

    values = frame.to_numpy(dtype=float)
    means = values.mean(axis=0)
    sigma = np.atleast_2d(np.cov(values, rowvar=False))
    diffs = pairwise_mean_diffs(means, contrasts)
    sds = pairwise_sd(contrasts, sigma)

    df = n - 1
    t_crit = float(t_dist.ppf(1.0 - alpha, df))
    bounds = ei - (sds / np.sqrt(n)) * t_crit
    passed = np.abs(diffs) <= bounds

    labels = tuple(str(c) for c in columns)
    outcomes = tuple(
        ContrastOutcome(
            i=i,
            j=j,
            labels=(labels[i], labels[j]),
            mean_diff=float(diffs[row]),
            sd_diff=float(sds[row]),
            bound=float(bounds[row]),
            equivalent=bool(passed[row]),
        )
        for row, (i, j) in enumerate(contrast_pairs(k))
    )
    decision = Decision.from_flag(bool(np.all(passed)))
    return PairwiseResult(
        k=k,
        n=n,
        labels=labels,
        means=tuple(float(m) for m in means),
        ei=ei,
        alpha=alpha,
        df=df,
        t_crit=t_crit,
        contrasts=outcomes,
        decision=decision,
        decision_text=PAIRWISE_DECISION_TEXT[decision],
        warnings=tuple(warnings),
    )
