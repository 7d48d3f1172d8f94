"""
Parsing of WebGeocalc result payloads into intercept points.

WebGeocalc returns calculation results as a table: a list of column
descriptors, each with an ``outputID``, and a list of rows whose values
are aligned positionally with the columns.  The intercept coordinates
live in the columns whose ``outputID`` is exactly ``X``, ``Y`` and
``Z`` (kilometres).

Recognised payload shapes are modelled explicitly.  Only the tabular
shape is supported; anything else is rejected with
:class:`~footprint.services.errors.UpstreamContractError` rather than
guessed at.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from .errors import UpstreamContractError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InterceptPointKm:
    """Surface intercept in kilometres, body‑fixed frame."""

    x_km: float
    y_km: float
    z_km: float

    def to_meters(self) -> tuple[float, float, float]:
        return (self.x_km * 1000.0, self.y_km * 1000.0, self.z_km * 1000.0)


@dataclass(frozen=True)
class TabularResult:
    """Column/row result table as returned by WebGeocalc."""

    columns: List[Dict[str, Any]]
    rows: List[Any]

    def output_ids(self) -> List[str]:
        return [str(col.get("outputID")) if isinstance(col, dict) else "?" for col in self.columns]

    def column_index(self, output_id: str) -> int:
        for idx, col in enumerate(self.columns):
            if isinstance(col, dict) and col.get("outputID") == output_id:
                return idx
        return -1


def classify_result(payload: Any) -> TabularResult:
    """Return the recognised shape of *payload*.

    Raises:
        UpstreamContractError: If the payload is not a tabular result.
    """
    if (
        isinstance(payload, dict)
        and isinstance(payload.get("columns"), list)
        and isinstance(payload.get("rows"), list)
    ):
        return TabularResult(columns=payload["columns"], rows=payload["rows"])
    keys = sorted(payload.keys()) if isinstance(payload, dict) else type(payload).__name__
    raise UpstreamContractError(
        "Unsupported WGC2 result format. Expected columns/rows format.",
        details={"receivedKeys": keys},
    )


def _coerce_number(value: Any) -> float:
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return math.nan
    return math.nan


def _first_row(table: TabularResult, indices: Sequence[int]) -> Sequence[Any]:
    if not table.rows:
        raise UpstreamContractError("No rows in WGC2 result data")
    row = table.rows[0]
    if not isinstance(row, (list, tuple)) or len(row) <= max(indices):
        raise UpstreamContractError(
            "Invalid row format in WGC2 result data",
            details={"row": row},
        )
    return row


def parse_intercept_point(payload: Any) -> InterceptPointKm:
    """Extract the first row's X/Y/Z values from a result payload.

    Args:
        payload: Result body returned by the results endpoint, already
            unwrapped from any ``result`` envelope.

    Returns:
        The intercept point in kilometres.

    Raises:
        UpstreamContractError: If the shape is unsupported, a column is
            missing, there are no rows or a value is not numeric.
    """
    table = classify_result(payload)
    indices = [table.column_index(axis) for axis in ("X", "Y", "Z")]
    if -1 in indices:
        available = table.output_ids()
        raise UpstreamContractError(
            "Could not find X, Y, Z columns in result data. "
            f"Available outputIDs: {', '.join(available)}",
            details={"availableOutputIds": available},
        )
    row = _first_row(table, indices)
    raw = [row[i] for i in indices]
    x, y, z = (_coerce_number(v) for v in raw)
    if not all(math.isfinite(c) for c in (x, y, z)):
        raise UpstreamContractError(
            f"Invalid numeric values in result row: x={raw[0]}, y={raw[1]}, z={raw[2]}",
            details={"row": list(row)},
        )
    logger.debug("Parsed intercept (km): x=%s y=%s z=%s", x, y, z)
    return InterceptPointKm(x_km=x, y_km=y, z_km=z)
