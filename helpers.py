# helpers.py - formatting & plain-language summary helpers
"""
Rendering of result records for the Streamlit UI layer (app.py) and for
console use.

- `update_parsed_counts`: summarize a parsed DataFrame for display
- `format_result`: multi-line report of a result record
- `describe_result`: plain-language summary paragraph of a result record

Nothing here recomputes statistics; every number comes from the record.
"""

from typing import Callable, Dict, List, Optional

import pandas as pd

from results import ResultKind

PROCEDURES = (
    "Two-sample TOST",
    "CI inclusion (two-sample)",
    "Dependent correlations",
    "Pairwise repeated measures",
)


def update_parsed_counts(df_parsed: Optional[pd.DataFrame], procedure: str) -> Optional[dict]:
    """Return a counts dict for the parsed table, or None if it does not fit the procedure."""
    if df_parsed is None or df_parsed.shape[1] == 0:
        return None

    numeric = df_parsed.apply(pd.to_numeric, errors="coerce")
    if procedure in ("Two-sample TOST", "CI inclusion (two-sample)"):
        if numeric.shape[1] < 2:
            return None
        return {
            "group1": int(numeric.iloc[:, 0].notna().sum()),
            "group2": int(numeric.iloc[:, 1].notna().sum()),
        }
    if procedure == "Dependent correlations":
        if numeric.shape[1] < 3:
            return None
        complete = numeric.iloc[:, :3].notna().all(axis=1)
        return {"complete rows": int(complete.sum()), "variables": 3}
    if procedure == "Pairwise repeated measures":
        complete = numeric.notna().all(axis=1)
        return {"complete rows": int(complete.sum()), "measures": int(numeric.shape[1])}
    return None


def _fmt(v, digits: int) -> str:
    if v is None:
        return "NA"
    return f"{v:.{digits}g}"


def _fmt_p(v, digits: int) -> str:
    if v is None:
        return "NA"
    if v < 0.001:
        return "< 0.001"
    return f"{v:.{digits}g}"


def _fmt_pair(values, digits: int) -> str:
    if values is None:
        return "NA"
    return " ".join(_fmt(v, digits) for v in values)


# -------------------------
# Report layout (one per result kind)
# -------------------------
def _format_tost(res, digits: int) -> List[str]:
    lines = [
        f"---- {res.title} ----",
        "",
        f"Means: {_fmt_pair(res.means, digits)}",
        f"SDs: {_fmt_pair(res.sds, digits)}",
        f"Trimmed Means: {_fmt_pair(res.trimmed_means, digits)}",
        f"The equivalence interval was {_fmt(res.ei, digits)} in unstandardized metric.",
        f"Test statistics: t1 = {_fmt(res.t1, digits)}, t2 = {_fmt(res.t2, digits)}",
        f"Degrees of freedom: {_fmt(res.df, digits)}",
        f"p-values: p_t1 = {_fmt(res.p1, digits)}, p_t2 = {_fmt(res.p2, digits)}",
        f"Decision: {res.decision_text}",
    ]
    return lines


def _format_tost_ci(res, digits: int) -> List[str]:
    return [
        "---- Equivalence test for confidence interval inclusion principle ----",
        "",
        f"Means: {_fmt_pair(res.means, digits)}. Mean difference is {_fmt(res.mean_diff, digits)}",
        f"SDs: {_fmt_pair(res.sds, digits)}",
        f"Equivalence interval is {_fmt(res.ei, digits)} in unstandardized metric.",
        "Note that this test provides the same result as TOST.",
        f"Confidence interval ({res.conf_level:.0%}): "
        f"[{_fmt(res.ci_lower, digits)}, {_fmt(res.ci_upper, digits)}]",
        f"Decision: {res.decision_text}",
        f"First one-sided test: t ({_fmt(res.df, digits)}) = {_fmt(res.t1, digits)}, p = {_fmt(res.p1, digits)}",
        f"Second one-sided test: t ({_fmt(res.df, digits)}) = {_fmt(res.t2, digits)}, p = {_fmt(res.p2, digits)}",
        f"Decision: {res.tost_decision_text}",
    ]


def _format_dependent_correlation(res, digits: int) -> List[str]:
    return [
        "---- Equivalence Test for Two Dependent Correlations ----",
        "",
        f"Correlations: r12 = {_fmt(res.r12, digits)}, r13 = {_fmt(res.r13, digits)}, "
        f"r23 = {_fmt(res.r23, digits)} (n = {res.n})",
        f"Difference r12 - r13: {_fmt(res.corr_diff, digits)}",
        f"The equivalence interval was {_fmt(res.ei, digits)}.",
        f"Standard error: {_fmt(res.se, digits)}",
        f"Test statistics: t1 = {_fmt(res.t1, digits)}, t2 = {_fmt(res.t2, digits)}",
        f"Degrees of freedom: {_fmt(res.df, digits)}",
        f"p-values: p_t1 = {_fmt(res.p1, digits)}, p_t2 = {_fmt(res.p2, digits)}",
        f"Decision: {res.decision_text}",
    ]


def _format_pairwise(res, digits: int) -> List[str]:
    lines = [
        "---- Pairwise Equivalence Test for Repeated Measures ----",
        "",
        f"{res.k} repeated measures, n = {res.n}",
        "Means: " + ", ".join(f"{lab} = {_fmt(m, digits)}" for lab, m in zip(res.labels, res.means)),
        f"The equivalence interval was {_fmt(res.ei, digits)} in unstandardized metric.",
        f"Critical t ({res.df} df): {_fmt(res.t_crit, digits)}",
    ]
    for c in res.contrasts:
        mark = "equivalent" if c.equivalent else "not equivalent"
        lines.append(
            f"  {c.labels[0]} - {c.labels[1]}: |diff| = {_fmt(abs(c.mean_diff), digits)}, "
            f"bound = {_fmt(c.bound, digits)} ({mark})"
        )
    lines.append(f"Decision: {res.decision_text}")
    return lines


_FORMATTERS: Dict[ResultKind, Callable] = {
    ResultKind.TOST: _format_tost,
    ResultKind.TOST_CI: _format_tost_ci,
    ResultKind.DEPENDENT_CORRELATION: _format_dependent_correlation,
    ResultKind.PAIRWISE: _format_pairwise,
}


def format_result(result, digits: int = 4) -> str:
    """
    Multi-line text report of a result record.

    Parameters
    ----------
    result : TostResult, TostCIResult, DependentCorrelationResult or PairwiseResult
    digits : int, optional
        Significant digits, by default 4.
    """
    lines = _FORMATTERS[result.kind](result, digits)
    for w in result.warnings:
        lines.append(f"Note: {w}")
    return "\n".join(lines)


def describe_result(result, digits: int = 3) -> str:
    """
    Plain-language summary paragraph in the style of R's describe methods.
    """
    alpha = result.alpha
    if result.kind is ResultKind.PAIRWISE:
        failing = result.failing_contrasts
        method_state = (
            f"Pairwise equivalence tests were performed on {result.k} repeated measures "
            f"(n = {result.n}) with alpha = {alpha} and an equivalence interval of ±{result.ei:g}."
        )
        if result.equivalent:
            claim = (
                f"All {len(result.contrasts)} pairwise mean differences fell within their bounds, "
                "so there is evidence that the repeated measures are equivalent."
            )
        else:
            names = ", ".join(f"{c.labels[0]} vs {c.labels[1]}" for c in failing)
            claim = (
                f"{len(failing)} of {len(result.contrasts)} pairwise comparisons exceeded their bounds "
                f"({names}), so there is no evidence for equivalence."
            )
        return f"{method_state} {claim}"

    if result.kind is ResultKind.DEPENDENT_CORRELATION:
        varname = "difference between the dependent correlations (r12 - r13)"
        estimate = result.corr_diff
        method = "equivalence test for two dependent correlations"
    elif result.kind is ResultKind.TOST:
        varname = "difference between the means"
        estimate = result.mean_diff
        method = result.title
    else:
        varname = "difference between the means"
        estimate = result.mean_diff
        method = "confidence-interval inclusion test"

    method_state = f"Using the {method}, two one-sided tests (TOST) were performed with alpha = {alpha}."
    p_tost = max(result.p1, result.p2)
    stat_text = f"The equivalence test had p = {_fmt_p(p_tost, digits)}."
    if result.equivalent:
        claim_text = (
            f"At the desired error rate, it can be stated that the {varname} "
            f"is between {-result.ei:g} and {result.ei:g}."
        )
    else:
        claim_text = (
            f"The null hypothesis that the {varname} lies outside ±{result.ei:g} cannot be rejected."
        )

    est_text = f" (estimate = {_fmt(estimate, digits)}"
    if result.kind is ResultKind.TOST_CI:
        est_text += (
            f"; {result.conf_level:.0%} C.I. [{_fmt(result.ci_lower, digits)}, {_fmt(result.ci_upper, digits)}]"
        )
    est_text += f"; SE = {_fmt(result.se, digits)}; df = {_fmt(result.df, digits)})"
    return f"{method_state} {stat_text} {claim_text}{est_text}"
