# app.py - Streamlit UI (imports backend + helpers + io_utils)
import traceback
from typing import Optional

import numpy as np
import pandas as pd
import streamlit as st

import backend as be
import io_utils
from helpers import PROCEDURES, describe_result, format_result, update_parsed_counts
from results import Regime

st.set_page_config(page_title="Equivalence tests", layout="wide")
st.title("Equivalence testing (TOST)")

REGIME_LABELS = {
    "Schuirmann-Yuen (robust, trimmed means)": Regime.ROBUST_TRIMMED,
    "Schuirmann-Welch (normal, unequal variances)": Regime.UNEQUAL_VARIANCE_NORMAL,
    "Schuirmann (normal, equal variances)": Regime.EQUAL_VARIANCE_NORMAL,
}

# Sidebar
with st.sidebar:
    st.header("Test selection")
    procedure = st.selectbox("Procedure", PROCEDURES, index=0)
    st.markdown("---")
    header_override = st.selectbox("Header detection override", io_utils.HEADER_MODES)
    show_debug = st.checkbox("Show tracebacks", value=False)

left_col, right_col = st.columns([2, 1])

for k, default in {
    "df_uploaded": None,
    "parsed_counts": None,
    "paste_text": "",
    "df_from_paste": None,
    "input_mode": None,
}.items():
    if k not in st.session_state:
        st.session_state[k] = default

DESCRIPTIONS = {
    "Two-sample TOST": (
        "Two one-sided tests for the difference between two independent group means. "
        "The robust Schuirmann-Yuen variant uses trimmed means and Winsorized variances and is "
        "recommended when normality cannot be assumed; Schuirmann-Welch assumes normality but not "
        "equal variances; the classic Schuirmann test assumes both."
    ),
    "CI inclusion (two-sample)": (
        "Confidence-interval inclusion test: equivalence is concluded when the (1 − 2α) confidence "
        "interval of the mean difference lies entirely inside the equivalence interval. Uses the "
        "pooled (equal-variance) standard error and gives the same decision as the Schuirmann TOST."
    ),
    "Dependent correlations": (
        "Equivalence of two overlapping dependent correlations (r12 vs r13, variable 1 shared) "
        "using Williams' standard error and df = n − 3. Provide three columns of raw data "
        "(shared variable first) or enter the three correlations and n."
    ),
    "Pairwise repeated measures": (
        "All pairwise comparisons among k repeated measures. The omnibus test concludes equivalence "
        "only if every pairwise mean difference lies inside its bound; no multiplicity correction "
        "is applied."
    ),
}

UPLOAD_HINTS = {
    "Two-sample TOST": "Upload CSV/XLS/XLSX with two columns (group1, group2) of numeric values.",
    "CI inclusion (two-sample)": "Upload CSV/XLS/XLSX with two columns (group1, group2) of numeric values.",
    "Dependent correlations": "Upload CSV/XLS/XLSX with three columns; the first is the shared variable.",
    "Pairwise repeated measures": "Upload CSV/XLS/XLSX with one column per repeated measure, one row per unit.",
}

# Protect against huge uploads
MAX_UPLOAD_BYTES = 8 * 1024 * 1024  # 8 MB


def _store_parsed(df_parsed: Optional[pd.DataFrame], key: str) -> None:
    st.session_state[key] = None if df_parsed is None else df_parsed.copy()
    st.session_state["parsed_counts"] = update_parsed_counts(df_parsed, procedure)


def generate_sample_data():
    rng = np.random.default_rng()
    if procedure in ("Two-sample TOST", "CI inclusion (two-sample)"):
        n1, n2 = rng.integers(15, 25, size=2)
        a = rng.normal(5.0, 1.0, n1)
        b = rng.normal(5.0, 1.0, n2)
        rows = []
        for i in range(max(n1, n2)):
            v1 = f"{a[i]:.6g}" if i < n1 else ""
            v2 = f"{b[i]:.6g}" if i < n2 else ""
            rows.append(f"{v1},{v2}")
    elif procedure == "Dependent correlations":
        n = 60
        shared = rng.normal(size=n)
        v2 = 0.5 * shared + rng.normal(scale=0.85, size=n)
        v3 = 0.5 * shared + rng.normal(scale=0.85, size=n)
        rows = [f"{shared[i]:.6g},{v2[i]:.6g},{v3[i]:.6g}" for i in range(n)]
    else:
        n = 20
        base = rng.normal(10.0, 2.0, n)
        cols = [base + rng.normal(0.0, 0.3, n) for _ in range(3)]
        rows = [",".join(f"{c[i]:.6g}" for c in cols) for i in range(n)]

    generated_text = "\n".join(rows)
    st.session_state["paste_text"] = generated_text
    df_parsed, _ = io_utils.parse_table_from_text(generated_text, header_override=header_override)
    _store_parsed(df_parsed, "df_from_paste")


# UI left column
with left_col:
    st.subheader(procedure)
    st.markdown(DESCRIPTIONS[procedure])

    input_modes = ["Upload file", "Paste table (text box)"]
    if procedure == "Two-sample TOST":
        input_modes.append("Summary statistics (manual)")
    elif procedure == "Dependent correlations":
        input_modes.append("Correlations (manual)")

    if st.session_state.get("input_mode") not in input_modes:
        st.session_state["input_mode"] = input_modes[0]
    input_mode = st.radio("Input mode", input_modes, horizontal=True, key="input_mode")

    if input_mode == "Upload file":
        uploaded_file = st.file_uploader(UPLOAD_HINTS[procedure], type=["csv", "txt", "xls", "xlsx"])
        if uploaded_file is not None:
            content = uploaded_file.getvalue()
            if len(content) > MAX_UPLOAD_BYTES:
                st.error(f"Uploaded file too large (> {MAX_UPLOAD_BYTES / (1024 * 1024):.1f} MB).")
                _store_parsed(None, "df_uploaded")
            else:
                try:
                    df_new, _ = io_utils.read_table_from_bytes(content, uploaded_file.name, header_override)
                    _store_parsed(df_new, "df_uploaded")
                except ValueError as e:
                    st.error(f"Error reading uploaded file: {e}")
                    _store_parsed(None, "df_uploaded")

    elif input_mode == "Paste table (text box)":
        st.text_area("Paste table here (tab or comma separated).", key="paste_text", height=240)
        st.button("Generate sample data", on_click=generate_sample_data)
        current_text = st.session_state.get("paste_text", "")
        if current_text.strip():
            df_parsed, _ = io_utils.parse_table_from_text(current_text, header_override=header_override)
            _store_parsed(df_parsed, "df_from_paste")

    elif input_mode == "Summary statistics (manual)":
        st.markdown("**Group 1**")
        m1 = st.number_input("Mean (group 1)", value=0.0)
        sd1 = st.number_input("SD (group 1)", min_value=0.0, value=1.0)
        n1 = st.number_input("n (group 1)", min_value=2, value=20)
        st.markdown("**Group 2**")
        m2 = st.number_input("Mean (group 2)", value=0.0)
        sd2 = st.number_input("SD (group 2)", min_value=0.0, value=1.0)
        n2 = st.number_input("n (group 2)", min_value=2, value=20)

    else:
        r12 = st.number_input("r12", min_value=-1.0, max_value=1.0, value=0.5, format="%.4f")
        r13 = st.number_input("r13", min_value=-1.0, max_value=1.0, value=0.45, format="%.4f")
        r23 = st.number_input("r23", min_value=-1.0, max_value=1.0, value=0.3, format="%.4f")
        n_corr = st.number_input("Sample size (n)", min_value=4, value=100)

# RIGHT COLUMN: test parameters and Run logic
with right_col:
    st.subheader("Test parameters")
    alpha_max = 0.499 if procedure == "CI inclusion (two-sample)" else 0.5
    alpha = st.number_input("Alpha level", min_value=1e-6, max_value=alpha_max, value=0.05, step=0.01, format="%.3f")
    default_ei = 0.1 if procedure == "Dependent correlations" else 0.5
    ei = st.number_input("Equivalence interval (±EI)", min_value=0.0, value=default_ei, format="%.6f")

    regime = None
    tr = 0.2
    if procedure == "Two-sample TOST":
        if input_mode == "Summary statistics (manual)":
            regime_labels = [lab for lab, r in REGIME_LABELS.items() if r is not Regime.ROBUST_TRIMMED]
        else:
            regime_labels = list(REGIME_LABELS)
        regime = REGIME_LABELS[st.selectbox("Variant", regime_labels)]
        if regime is Regime.ROBUST_TRIMMED:
            tr = st.number_input("Trim proportion (each tail)", min_value=0.0, max_value=0.49, value=0.2, step=0.05)
    na_rm = st.checkbox("Drop missing values", value=procedure != "CI inclusion (two-sample)")

    run_button = st.button("Run equivalence test")


def _table_in_use() -> pd.DataFrame:
    key = "df_uploaded" if input_mode == "Upload file" else "df_from_paste"
    df = st.session_state.get(key)
    if df is None or df.shape[1] == 0:
        raise ValueError("No data available. Upload a file or paste a table, then click Run.")
    return df


results_placeholder = st.empty()

try:
    if run_button:
        with results_placeholder.container():
            if input_mode == "Summary statistics (manual)":
                result = be.tost_from_summary(
                    m1, sd1, int(n1), m2, sd2, int(n2), ei, alpha,
                    varequal=regime is Regime.EQUAL_VARIANCE_NORMAL,
                )
            elif input_mode == "Correlations (manual)":
                result = be.dependent_correlation_tost([r12, r13, r23], ei, n=int(n_corr), alpha=alpha)
            else:
                df_use = _table_in_use()
                pc = st.session_state.get("parsed_counts")
                if pc:
                    st.write("Parsed counts: " + ", ".join(f"{k}: {v}" for k, v in pc.items()))
                if procedure == "Two-sample TOST":
                    x, y = io_utils.two_column_samples(df_use)
                    result = be.two_sample_tost(x, y, ei, tr=tr, alpha=alpha, na_rm=na_rm, regime=regime)
                elif procedure == "CI inclusion (two-sample)":
                    x, y = io_utils.two_column_samples(df_use)
                    result = be.two_sample_tost_ci(x, y, ei, alpha=alpha, na_rm=na_rm)
                elif procedure == "Dependent correlations":
                    if df_use.shape[1] != 3:
                        raise ValueError("Dependent correlations require exactly three columns.")
                    result = be.dependent_correlation_tost(io_utils.numeric_frame(df_use), ei, alpha=alpha, na_rm=na_rm)
                else:
                    result = be.pairwise_repeated_tost(io_utils.numeric_frame(df_use), ei, alpha=alpha, na_rm=na_rm)

            st.markdown("## Results")
            for w in result.warnings:
                st.warning(w)

            st.markdown("### Decision")
            if result.equivalent:
                st.success(f"Equivalent at α = {alpha}")
            else:
                st.error(f"Not significantly equivalent at α = {alpha}")

            st.markdown("### Plain-language summary")
            st.write(describe_result(result, digits=3))

            st.markdown("### Report")
            st.code(format_result(result, digits=4), language=None)

            if input_mode in ("Upload file", "Paste table (text box)"):
                st.markdown("### Data preview (first 10 rows)")
                st.dataframe(_table_in_use().head(10))

            st.markdown("### Diagnostic details")
            st.json(result.to_dict(), expanded=False)

except ValueError as e:
    st.error(f"Error: {e}")
    if show_debug:
        st.subheader("Traceback (debug)")
        st.code(traceback.format_exc())
