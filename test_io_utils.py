# test_io_utils.py
# run as: pytest -q test_io_utils.py
import io

import numpy as np
import pandas as pd
import pytest

from io_utils import numeric_frame, parse_table_from_text, read_table_from_bytes, two_column_samples


def test_comma_text_with_header():
    df, header_used = parse_table_from_text("before,after\n1,2\n3,4\n5,6\n")
    assert header_used
    assert list(df.columns) == ["before", "after"]
    assert df.shape == (3, 2)


def test_whitespace_text_without_header():
    df, header_used = parse_table_from_text("1 2\n3   4\n")
    assert not header_used
    assert list(df.columns) == ["col1", "col2"]
    assert numeric_frame(df).to_numpy().tolist() == [[1.0, 2.0], [3.0, 4.0]]


def test_header_override():
    text = "a\tb\n1\t2\n"
    df, header_used = parse_table_from_text(text, header_override="Force no header")
    assert not header_used
    assert df.shape == (2, 2)
    df, header_used = parse_table_from_text("1;2\n3;4\n", header_override="Force header")
    assert header_used
    assert list(df.columns) == ["1", "2"]


def test_empty_text():
    df, header_used = parse_table_from_text("   \n\n")
    assert df.empty and not header_used


def test_ragged_columns_become_two_samples():
    text = "g1,g2\n1,10\n2,11\n3,\n4,\n"
    df, _ = parse_table_from_text(text)
    a, b = two_column_samples(df)
    assert a.tolist() == [1.0, 2.0, 3.0, 4.0]
    assert b.tolist() == [10.0, 11.0]


def test_interior_gaps_stay_missing():
    df, _ = parse_table_from_text("g1,g2\n1,10\n,11\n3,12\n")
    a, _ = two_column_samples(df)
    assert a.size == 3
    assert np.isnan(a[1])


def test_numeric_frame_coerces_text_to_nan():
    df = pd.DataFrame({"a": ["1.5", "abc", None], "b": ["2", "3", "4"]})
    num = numeric_frame(df, ["a"])
    assert list(num.columns) == ["a"]
    assert num["a"].dtype == float
    assert num["a"].iloc[0] == 1.5
    assert num["a"].isna().sum() == 2


def test_two_column_samples_needs_two_columns():
    with pytest.raises(ValueError):
        two_column_samples(pd.DataFrame({"a": [1.0, 2.0]}))


def test_csv_bytes_with_bom():
    content = "\ufeffx,y\n1,2\n3,4\n".encode("utf-8")
    df, header_used = read_table_from_bytes(content, filename="data.csv")
    assert header_used
    assert list(df.columns) == ["x", "y"]


def test_xlsx_bytes():
    buf = io.BytesIO()
    pd.DataFrame({"m1": [1.0, 2.0, 3.0], "m2": [1.5, 2.5, 3.5]}).to_excel(buf, index=False, engine="openpyxl")
    df, header_used = read_table_from_bytes(buf.getvalue(), filename="measures.xlsx")
    assert header_used
    assert list(df.columns) == ["m1", "m2"]
    assert numeric_frame(df)["m2"].tolist() == [1.5, 2.5, 3.5]


def test_unreadable_excel_is_a_value_error():
    with pytest.raises(ValueError):
        read_table_from_bytes(b"not a workbook", filename="broken.xlsx")
