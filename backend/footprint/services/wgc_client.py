"""
Client for the WebGeocalc (WGC2) job‑based calculation API.

A calculation is run in three logical steps:

1. ``POST {base}/calculation/new`` submits the job and returns a
   ``calculationId`` plus, optionally, its current phase.
2. ``GET {base}/calculation/{id}`` reports the job phase.  The client
   polls this endpoint at a fixed interval until the phase is
   ``COMPLETE`` or ``FAILED`` or the attempt ceiling is reached.
3. ``GET {base}/calculation/{id}/results`` returns the result table, or
   the failure detail for a failed job.

:meth:`WgcClient.run_calculation` drives one job through the state
machine ``SUBMITTED -> POLLING -> COMPLETE | FAILED | TIMED_OUT`` and
either returns the raw result payload or raises a subclass of
:class:`~footprint.services.errors.UpstreamError`.  All state for a job
lives in a per‑call :class:`JobTracker`; the client itself holds only
configuration, so one client may serve several jobs concurrently.

The poll sleep is injectable so tests can simulate phase transitions
without waiting.  Enabling ``WgcSettings.debug_payloads`` logs
raw response payloads at debug level.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

import requests

from .config import WgcSettings
from .errors import (
    UpstreamCalculationError,
    UpstreamContractError,
    UpstreamError,
    UpstreamStatusError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)
from .fov_rays import CalculationRequest

logger = logging.getLogger(__name__)

# Message used when a FAILED job's detail cannot be retrieved.
FAILED_DETAIL_FALLBACK = "calculation reported phase FAILED; failure details unavailable"

_INVALID_JOB_ID_CHARS = re.compile(r"[<>\"'{}|\\^`\[\]\s/?#]")


class JobPhase(str, Enum):
    """Phases reported by WebGeocalc.

    Only ``COMPLETE`` and ``FAILED`` are significant to the client; any
    other value, including names not listed here, means "still running".
    """

    PENDING = "PENDING"
    QUEUED = "QUEUED"
    LOADING_KERNELS = "LOADING_KERNELS"
    CALCULATING = "CALCULATING"
    COMPLETE = "COMPLETE"
    FAILED = "FAILED"


TERMINAL_PHASES = frozenset({JobPhase.COMPLETE.value, JobPhase.FAILED.value})


class JobState(str, Enum):
    SUBMITTED = "SUBMITTED"
    POLLING = "POLLING"
    COMPLETE = "COMPLETE"
    FAILED = "FAILED"
    TIMED_OUT = "TIMED_OUT"


@dataclass
class JobTracker:
    """Mutable bookkeeping for a single job, owned by one ``run_calculation`` call."""

    job_id: str
    phase: str
    state: JobState = JobState.SUBMITTED
    attempts: int = 0


def validate_job_id(job_id: Any) -> str:
    """Return *job_id* if it is a usable, URL‑safe identifier.

    Raises:
        UpstreamContractError: If the handle is missing, not a string or
            contains characters that cannot appear in a path segment.
    """
    if not job_id or not isinstance(job_id, str):
        raise UpstreamContractError(
            "Invalid job ID returned from WGC2 API. "
            f"Expected a string, but received: {type(job_id).__name__}",
            status_code=500,
        )
    if _INVALID_JOB_ID_CHARS.search(job_id):
        raise UpstreamContractError(
            f"Invalid job ID format: contains invalid characters. JobId: {job_id}",
            status_code=500,
        )
    return job_id


def _phase_of(envelope: Dict[str, Any]) -> str:
    result = envelope.get("result")
    phase = result.get("phase") if isinstance(result, dict) else None
    return str(phase) if phase else JobPhase.PENDING.value


class WgcClient:
    """Submit, poll and fetch WebGeocalc calculations.

    Args:
        settings: Endpoint and polling configuration.  Defaults to
            :meth:`WgcSettings.from_env`.
        session: ``requests.Session`` (or compatible object exposing
            ``request``) used for every HTTP call.  A private session is
            created when omitted and closed by :meth:`close`.
        sleep: Callable used to wait between polls.
    """

    def __init__(
        self,
        settings: Optional[WgcSettings] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.settings = settings or WgcSettings.from_env()
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()
        self._sleep = sleep

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "WgcClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    def _url(self, *parts: str) -> str:
        return "/".join([self.settings.base_url.rstrip("/"), *parts])

    def _send_json(
        self,
        method: str,
        url: str,
        action: str,
        body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Perform one HTTP call and return the decoded JSON body."""
        try:
            response = self._session.request(
                method,
                url,
                json=body,
                headers={"Content-Type": "application/json"},
                timeout=self.settings.request_timeout_s,
            )
        except requests.RequestException as exc:
            logger.error("[WGC2] Network error while %s (%s): %s", action, url, exc)
            raise UpstreamUnavailableError(
                f"Network error while {action}: {exc}",
                details={"requestUrl": url},
            ) from exc

        if not response.ok:
            error_text = response.text or response.reason or ""
            logger.error(
                "[WGC2] HTTP %s while %s (%s): %s",
                response.status_code,
                action,
                url,
                error_text,
            )
            raise UpstreamStatusError(
                f"Failed {action}: {response.reason} ({response.status_code}). "
                f"Requested URL: {url}. Response: {error_text}",
                status_code=404 if response.status_code == 404 else 502,
                details={
                    "status": response.status_code,
                    "statusText": response.reason,
                    "requestUrl": url,
                    "responseBody": error_text,
                },
            )

        try:
            data = response.json()
        except ValueError as exc:
            logger.error("[WGC2] Invalid JSON while %s (%s): %s", action, url, exc)
            raise UpstreamContractError(
                f"Failed to parse WGC2 response while {action}. Invalid JSON received.",
                details={"requestUrl": url},
            ) from exc
        if self.settings.debug_payloads:
            logger.debug("[WGC2] %s payload: %r", action, data)
        return data

    @staticmethod
    def _check_envelope(data: Any, action: str) -> Dict[str, Any]:
        if not isinstance(data, dict):
            raise UpstreamContractError(
                f"Unexpected WGC2 response while {action}: expected an object, got {type(data).__name__}",
                details={"fullResponse": data},
            )
        if data.get("status") != "OK" or data.get("error"):
            reason = data.get("error") or data.get("message") or "Unknown error"
            raise UpstreamCalculationError(
                f"WGC2 {action} failed: {reason}",
                details={"error": reason, "fullResponse": data},
            )
        return data

    # ------------------------------------------------------------------
    # Logical operations
    # ------------------------------------------------------------------
    def submit(self, request: CalculationRequest) -> Tuple[str, str]:
        """Submit a calculation and return ``(job_id, phase)``."""
        url = self._url("calculation", "new")
        logger.info(
            "[WGC2] Submitting %s for direction (%.6f, %.6f, %.6f)",
            request.calculation_type,
            request.direction.x,
            request.direction.y,
            request.direction.z,
        )
        data = self._send_json("POST", url, "submitting calculation request", body=request.to_payload())
        envelope = self._check_envelope(data, "calculation request")
        job_id = validate_job_id(envelope.get("calculationId"))
        return job_id, _phase_of(envelope)

    def get_phase(self, job_id: str) -> str:
        """Return the current phase of *job_id*."""
        url = self._url("calculation", job_id)
        data = self._send_json("GET", url, "checking calculation status")
        return _phase_of(self._check_envelope(data, "status check"))

    def get_result(self, job_id: str) -> Any:
        """Fetch the result payload of a completed job.

        The payload is unwrapped from a ``result`` key when present.

        Raises:
            UpstreamCalculationError: If the payload embeds an ``error``.
            UpstreamContractError: If the payload is empty.
        """
        url = self._url("calculation", job_id, "results")
        data = self._send_json("GET", url, "fetching calculation results")
        result_data = data
        if isinstance(data, dict) and data.get("result"):
            result_data = data["result"]
        if isinstance(result_data, dict) and result_data.get("error"):
            raise UpstreamCalculationError(
                f"WGC2 calculation returned an error in results: {result_data['error']}",
                details={
                    "phase": JobPhase.COMPLETE.value,
                    "error": result_data["error"],
                    "jobId": job_id,
                    "fullResponse": data,
                },
            )
        if not result_data:
            raise UpstreamContractError(
                "WGC2 returned null result data",
                details={"jobId": job_id, "fullResponse": data},
            )
        return result_data

    def describe_failure(self, job_id: str) -> Tuple[str, Optional[Any]]:
        """Best‑effort retrieval of a failed job's error text.

        Returns ``(message, payload)``.  Any error while fetching the
        detail yields :data:`FAILED_DETAIL_FALLBACK` and ``None``.
        """
        url = self._url("calculation", job_id, "results")
        try:
            data = self._send_json("GET", url, "fetching failure details")
        except UpstreamError as exc:
            logger.warning("[WGC2] Could not retrieve failure details for job %s: %s", job_id, exc.message)
            return FAILED_DETAIL_FALLBACK, None
        if isinstance(data, dict):
            inner = data.get("result") if isinstance(data.get("result"), dict) else {}
            message = (
                data.get("error")
                or data.get("message")
                or inner.get("error")
                or inner.get("message")
            )
            if message:
                return str(message), data
        return FAILED_DETAIL_FALLBACK, data

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------
    def _raise_failed(self, tracker: JobTracker) -> None:
        tracker.state = JobState.FAILED
        message, payload = self.describe_failure(tracker.job_id)
        logger.error("[WGC2] Job %s failed: %s", tracker.job_id, message)
        raise UpstreamCalculationError(
            f"WGC2 calculation failed: {message}",
            details={
                "phase": JobPhase.FAILED.value,
                "state": tracker.state.value,
                "jobId": tracker.job_id,
                "error": message,
                "errorDetails": payload,
            },
        )

    def _poll(self, tracker: JobTracker) -> None:
        tracker.state = JobState.POLLING
        max_attempts = self.settings.max_poll_attempts
        while tracker.phase not in TERMINAL_PHASES and tracker.attempts < max_attempts:
            self._sleep(self.settings.poll_interval_s)
            tracker.attempts += 1
            phase = self.get_phase(tracker.job_id)
            if phase != tracker.phase:
                logger.info(
                    "[WGC2] Job %s phase %s -> %s (attempt %d/%d)",
                    tracker.job_id,
                    tracker.phase,
                    phase,
                    tracker.attempts,
                    max_attempts,
                )
            tracker.phase = phase

        if tracker.phase not in TERMINAL_PHASES:
            tracker.state = JobState.TIMED_OUT
            waited = tracker.attempts * self.settings.poll_interval_s
            raise UpstreamTimeoutError(
                f"Calculation did not complete within {max_attempts} attempts "
                f"({waited:g} seconds). Last phase: {tracker.phase}",
                details={
                    "phase": tracker.phase,
                    "state": tracker.state.value,
                    "jobId": tracker.job_id,
                    "pollAttempts": tracker.attempts,
                },
            )

    def run_calculation(self, request: CalculationRequest) -> Any:
        """Run one calculation to completion and return its result payload.

        Raises:
            UpstreamError: Any transport, status, contract, calculation
                or timeout failure for this job.
        """
        job_id, phase = self.submit(request)
        tracker = JobTracker(job_id=job_id, phase=phase)
        logger.info("[WGC2] Job %s submitted, initial phase %s", job_id, phase)

        if phase not in TERMINAL_PHASES:
            self._poll(tracker)

        if tracker.phase == JobPhase.FAILED.value:
            self._raise_failed(tracker)

        result = self.get_result(job_id)
        tracker.state = JobState.COMPLETE
        logger.info("[WGC2] Job %s complete after %d poll(s)", job_id, tracker.attempts)
        return result
