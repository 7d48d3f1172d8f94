"""Tests for extracting intercept points from WebGeocalc result tables."""

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from footprint.services.errors import UpstreamContractError
from footprint.services.wgc_results import parse_intercept_point

from wgc_fakes import xyz_table


def test_parses_first_row_by_output_id() -> None:
    """Columns are located by outputID, not by position."""
    payload = xyz_table(-0.12, 0.034, 0.25)
    payload["rows"].append(["later", 9.0, 9.0, 9.0])
    point = parse_intercept_point(payload)
    assert (point.x_km, point.y_km, point.z_km) == (-0.12, 0.034, 0.25)


def test_numeric_strings_are_coerced() -> None:
    point = parse_intercept_point(xyz_table("0.1", " 0.2 ", "-3e-1"))
    assert point.x_km == pytest.approx(0.1)
    assert point.y_km == pytest.approx(0.2)
    assert point.z_km == pytest.approx(-0.3)


def test_missing_column_names_available_identifiers() -> None:
    payload = xyz_table(1, 2, 3)
    payload["columns"][3]["outputID"] = "ALTITUDE"
    with pytest.raises(UpstreamContractError) as info:
        parse_intercept_point(payload)
    message = info.value.message
    assert "Available outputIDs: DATE, X, Y, ALTITUDE" in message
    assert info.value.details["availableOutputIds"] == ["DATE", "X", "Y", "ALTITUDE"]


def test_output_id_match_is_case_exact() -> None:
    payload = xyz_table(1, 2, 3)
    payload["columns"][1]["outputID"] = "x"
    with pytest.raises(UpstreamContractError):
        parse_intercept_point(payload)


def test_no_rows_fails() -> None:
    payload = xyz_table(1, 2, 3)
    payload["rows"] = []
    with pytest.raises(UpstreamContractError) as info:
        parse_intercept_point(payload)
    assert "No rows" in info.value.message


def test_short_row_fails() -> None:
    payload = xyz_table(1, 2, 3)
    payload["rows"] = [["2019-09-21", 1.0]]
    with pytest.raises(UpstreamContractError):
        parse_intercept_point(payload)


@pytest.mark.parametrize("bad", ["n/a", None, True, "nan"])
def test_non_numeric_value_fails(bad) -> None:
    with pytest.raises(UpstreamContractError) as info:
        parse_intercept_point(xyz_table(1.0, bad, 3.0))
    assert "Invalid numeric values" in info.value.message


@pytest.mark.parametrize(
    "payload",
    [
        {"vertices": [[1, 2, 3], [4, 5, 6]]},
        {"data": [{"x": 1, "y": 2, "z": 3}]},
        [[1, 2, 3]],
        "X=1 Y=2 Z=3",
    ],
)
def test_unsupported_shapes_fail_fast(payload) -> None:
    with pytest.raises(UpstreamContractError) as info:
        parse_intercept_point(payload)
    assert "Unsupported WGC2 result format" in info.value.message
