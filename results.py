# results.py
"""
Result records returned by the equivalence procedures in `backend`.

Each procedure returns one immutable record. Records carry a `kind` tag so
the reporting helpers can dispatch on it without inspecting types, and a
`warnings` tuple with non-fatal notes gathered during the computation.

Docstrings in this file follow the NumPy documentation style.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Optional, Tuple

import numpy as np


class ResultKind(str, Enum):
    """Tag naming the procedure that produced a result."""
    TOST = "tost"
    TOST_CI = "tost_ci"
    DEPENDENT_CORRELATION = "dependent_correlation"
    PAIRWISE = "pairwise"


class Regime(str, Enum):
    """Variance/normality assumptions used by the two-sample TOST."""
    EQUAL_VARIANCE_NORMAL = "equal_variance_normal"
    UNEQUAL_VARIANCE_NORMAL = "unequal_variance_normal"
    ROBUST_TRIMMED = "robust_trimmed"


class Decision(str, Enum):
    """Outcome of an equivalence test."""
    REJECT_NON_EQUIVALENCE = "reject_non_equivalence"
    FAIL_TO_REJECT = "fail_to_reject"

    @classmethod
    def from_flag(cls, equivalent: bool) -> "Decision":
        return cls.REJECT_NON_EQUIVALENCE if equivalent else cls.FAIL_TO_REJECT


MEANS_DECISION_TEXT = {
    Decision.REJECT_NON_EQUIVALENCE: (
        "The null hypothesis that the difference between the means exceeds "
        "the equivalence interval can be rejected"
    ),
    Decision.FAIL_TO_REJECT: (
        "The null hypothesis that the difference between the means exceeds "
        "the equivalence interval cannot be rejected"
    ),
}

CI_DECISION_TEXT = {
    Decision.REJECT_NON_EQUIVALENCE: "CI bounds are within EI. Reject in favour of equivalence",
    Decision.FAIL_TO_REJECT: "CI bounds are outside EI. Don't reject in favour of equivalence",
}

CORRELATION_DECISION_TEXT = {
    Decision.REJECT_NON_EQUIVALENCE: (
        "The null hypothesis that the difference between the dependent correlations "
        "exceeds the equivalence interval can be rejected"
    ),
    Decision.FAIL_TO_REJECT: (
        "The null hypothesis that the difference between the dependent correlations "
        "exceeds the equivalence interval cannot be rejected"
    ),
}

PAIRWISE_DECISION_TEXT = {
    Decision.REJECT_NON_EQUIVALENCE: "evidence for equivalence",
    Decision.FAIL_TO_REJECT: "No evidence for equivalence",
}


def _plain(value: Any) -> Any:
    """Convert enums, numpy scalars and nested records to JSON-friendly values."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value


class _RecordMixin:
    """Shared helpers for result records."""

    @property
    def equivalent(self) -> bool:
        return self.decision is Decision.REJECT_NON_EQUIVALENCE

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: _plain(getattr(self, f.name)) for f in fields(self)}


@dataclass(frozen=True)
class TostResult(_RecordMixin):
    """
    Two independent groups TOST (Schuirmann, Schuirmann-Welch or Schuirmann-Yuen).

    Attributes
    ----------
    title : str
        Name of the test variant that was run.
    regime : Regime
        Variance/normality regime used for SE and df.
    means, trimmed_means, sds : tuple of float
        Group 1 and group 2 descriptives. `trimmed_means` is None when the
        result was built from summary statistics.
    ns : tuple of int
        Group sizes after missing-value removal.
    ei, alpha, tr : float
        Equivalence interval half-width, Type-I error rate and trim proportion.
    mean_diff : float
        Location difference on the regime's scale (trimmed for the robust regime).
    se, df : float
        Standard error and degrees of freedom shared by both one-sided tests.
    t1, t2 : float
        (diff - ei) / se and (diff + ei) / se.
    p1, p2 : float
        P(T <= t1) and P(T >= t2).
    decision : Decision
    decision_text : str
    warnings : tuple of str
    """
    title: str
    regime: Regime
    means: Tuple[float, float]
    trimmed_means: Optional[Tuple[float, float]]
    sds: Tuple[float, float]
    ns: Tuple[int, int]
    ei: float
    alpha: float
    tr: float
    mean_diff: float
    se: float
    df: float
    t1: float
    t2: float
    p1: float
    p2: float
    decision: Decision
    decision_text: str
    warnings: Tuple[str, ...] = ()
    kind: ResultKind = field(default=ResultKind.TOST, init=False)


@dataclass(frozen=True)
class TostCIResult(_RecordMixin):
    """
    Confidence-interval inclusion test for two independent groups.

    `decision` is the confidence-interval decision; `tost_decision` is the
    accompanying one-sided tests decision, kept for reporting. The interval
    has level `conf_level` = 1 - 2 * alpha and half-width `t_crit` * `se`.
    """
    means: Tuple[float, float]
    sds: Tuple[float, float]
    ns: Tuple[int, int]
    mean_diff: float
    ei: float
    alpha: float
    se: float
    df: float
    t1: float
    t2: float
    p1: float
    p2: float
    tost_decision: Decision
    tost_decision_text: str
    conf_level: float
    t_crit: float
    ci_lower: float
    ci_upper: float
    decision: Decision
    decision_text: str
    warnings: Tuple[str, ...] = ()
    kind: ResultKind = field(default=ResultKind.TOST_CI, init=False)

    @property
    def ci_bounds(self) -> Tuple[float, float]:
        return (self.ci_lower, self.ci_upper)


@dataclass(frozen=True)
class DependentCorrelationResult(_RecordMixin):
    """
    Equivalence of two dependent correlations sharing variable 1 (r12 vs r13).

    `source` is "raw" when correlations were computed from data and
    "correlations" when they were supplied directly.
    """
    r12: float
    r13: float
    r23: float
    n: int
    corr_diff: float
    ei: float
    alpha: float
    determinant: float
    se: float
    df: float
    t1: float
    t2: float
    p1: float
    p2: float
    decision: Decision
    decision_text: str
    source: str
    warnings: Tuple[str, ...] = ()
    kind: ResultKind = field(default=ResultKind.DEPENDENT_CORRELATION, init=False)


@dataclass(frozen=True)
class ContrastOutcome:
    """One pairwise contrast of the repeated-measures test (zero-based i < j)."""
    i: int
    j: int
    labels: Tuple[str, str]
    mean_diff: float
    sd_diff: float
    bound: float
    equivalent: bool

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: _plain(getattr(self, f.name)) for f in fields(self)}


@dataclass(frozen=True)
class PairwiseResult(_RecordMixin):
    """
    Pairwise repeated-measures equivalence test in unstandardized metric.

    The omnibus `decision` is equivalence only when every contrast satisfies
    its bound.
    """
    k: int
    n: int
    labels: Tuple[str, ...]
    means: Tuple[float, ...]
    ei: float
    alpha: float
    df: int
    t_crit: float
    contrasts: Tuple[ContrastOutcome, ...]
    decision: Decision
    decision_text: str
    warnings: Tuple[str, ...] = ()
    kind: ResultKind = field(default=ResultKind.PAIRWISE, init=False)

    @property
    def failing_contrasts(self) -> Tuple[ContrastOutcome, ...]:
        return tuple(c for c in self.contrasts if not c.equivalent)
