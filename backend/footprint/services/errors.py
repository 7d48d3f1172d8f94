"""
Error taxonomy for the footprint service.

Every failure the core can produce is a subclass of
:class:`FootprintError`.  Each error carries a human‑readable message,
the HTTP status the outer API layer should answer with, a stable
``kind`` string that lets callers tell the failure classes apart, and an
optional ``details`` dictionary with upstream diagnostics (phase at
failure, upstream status and body, error text, raw payload).

The classes map onto the failure categories of the service:

- ``FootprintConfigError`` – invalid caller parameters, rejected
  before any network activity.
- ``UpstreamUnavailableError`` – transport failure talking to
  WebGeocalc (connection refused, reset, DNS, timeout on the socket).
- ``UpstreamStatusError`` – WebGeocalc answered with a non‑success
  HTTP status.
- ``UpstreamContractError`` – the response body could not be parsed
  or lacked a required field (job handle, X/Y/Z columns, rows).
- ``UpstreamCalculationError`` – a well‑formed response reporting a
  failed calculation or carrying an embedded error.
- ``UpstreamTimeoutError`` – the poll ceiling was reached while the
  job was still running.
- ``InsufficientInterceptsError`` / ``InsufficientVerticesError`` –
  not enough geometry survived to form a polygon.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple


class FootprintError(Exception):
    """Base class for all structured footprint errors."""

    kind: str = "internal"
    default_status_code: int = 500

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code if status_code is not None else self.default_status_code
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON‑serialisable error body used by the API layer."""
        return {
            "error": self.message,
            "kind": self.kind,
            "statusCode": self.status_code,
            "details": self.details,
        }


class FootprintConfigError(FootprintError):
    kind = "configuration"
    default_status_code = 400


class UpstreamError(FootprintError):
    """Failure attributable to the remote calculation service."""

    default_status_code = 502


class UpstreamUnavailableError(UpstreamError):
    kind = "upstream_unavailable"


class UpstreamStatusError(UpstreamError):
    kind = "upstream_failure"


class UpstreamContractError(UpstreamError):
    kind = "upstream_contract_violation"


class UpstreamCalculationError(UpstreamError):
    kind = "upstream_calculation_failure"


class UpstreamTimeoutError(UpstreamError):
    kind = "timeout"
    default_status_code = 504


class InsufficientVerticesError(FootprintError):
    kind = "result_too_sparse"


@dataclass(frozen=True)
class RayFailure:
    """Record of one boundary ray that did not yield an intercept.

    Attributes:
        index: Position of the ray in generation order.
        direction: Unit direction of the ray in the instrument frame.
        kind: ``kind`` of the error raised for this ray.
        message: Error message raised for this ray.
    """

    index: int
    direction: Tuple[float, float, float]
    kind: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "direction": list(self.direction),
            "kind": self.kind,
            "message": self.message,
        }


class InsufficientInterceptsError(FootprintError):
    """Fewer than three rays produced a surface intercept."""

    kind = "result_too_sparse"

    def __init__(
        self,
        success_count: int,
        ray_count: int,
        failures: Optional[List[RayFailure]] = None,
    ) -> None:
        self.success_count = success_count
        self.ray_count = ray_count
        self.failures = list(failures or [])
        message = (
            f"Insufficient intercepts to form a polygon; boundary size: {success_count}. "
            f"Failed rays: {len(self.failures)}/{ray_count}"
        )
        super().__init__(
            message,
            details={
                "successCount": success_count,
                "rayCount": ray_count,
                "failures": [f.to_dict() for f in self.failures],
            },
        )
