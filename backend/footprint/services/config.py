"""
Configuration for footprint computations.

Two immutable structures are defined here:

- :class:`FootprintParams` describes *what* to compute: the instant,
  kernel set, observer, target, frames, shape model, coordinate
  representation and the field‑of‑view rectangle to trace.
- :class:`WgcSettings` describes *how* to talk to the WebGeocalc
  service: base URL, poll interval, poll attempt ceiling and the HTTP
  request timeout.

Defaults correspond to the OSIRIS‑REx PolyCam deployment against
asteroid Bennu.  They are applied at the API boundary; the services
receive fully populated instances and never read module globals or the
environment themselves.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .errors import FootprintConfigError


DEFAULT_WGC_URL = "https://wgc2.jpl.nasa.gov:8443/webgeocalc/api"
DEFAULT_KERNEL_SET_ID = 35
DEFAULT_UTC = "2019-09-21T21:01:12.885Z"
DEFAULT_OBSERVER = "OSIRIS-REx"
DEFAULT_TARGET = "BENNU"
DEFAULT_REFERENCE_FRAME = "IAU_BENNU"
DEFAULT_ABERRATION_CORRECTION = "NONE"
DEFAULT_DIRECTION_FRAME = "ORX_OCAMS_POLYCAM"
DEFAULT_HALF_HORIZ_DEG = 0.6
DEFAULT_HALF_VERT_DEG = 0.6
DEFAULT_SAMPLES_PER_EDGE = 2

DEFAULT_POLL_INTERVAL_S = 5.0
DEFAULT_MAX_POLL_ATTEMPTS = 12
DEFAULT_REQUEST_TIMEOUT_S = 30.0


class ShapeModel(str, Enum):
    """Surface model used for the intercept calculation."""

    DSK = "DSK"
    ELLIPSOID = "ELLIPSOID"


class StateRepresentation(str, Enum):
    """Coordinate representation requested from the service."""

    RECTANGULAR = "RECTANGULAR"
    PLANETOGRAPHIC = "PLANETOGRAPHIC"
    LATITUDINAL = "LATITUDINAL"


@dataclass(frozen=True)
class FootprintParams:
    """Inputs for one footprint computation.

    Attributes:
        utc: Instant of the observation as an ISO‑8601 UTC string.
        kernel_set_id: WebGeocalc kernel set identifier.
        shape: Surface model of the target body.
        state_representation: Coordinate representation of the result.
        observer: Observer name or NAIF id.
        target: Target body name.
        reference_frame: Frame in which the intercept is expressed.
        target_frame: Body‑fixed frame of the target.
        aberration_correction: Aberration correction mode.
        direction_frame: Instrument frame in which ray directions are given.
        half_horiz_deg: Horizontal FOV half‑angle in degrees.
        half_vert_deg: Vertical FOV half‑angle in degrees.
        samples_per_edge: Number of rays sampled along each FOV edge.
    """

    utc: str = DEFAULT_UTC
    kernel_set_id: int = DEFAULT_KERNEL_SET_ID
    shape: ShapeModel = ShapeModel.DSK
    state_representation: StateRepresentation = StateRepresentation.RECTANGULAR
    observer: Union[str, int] = DEFAULT_OBSERVER
    target: str = DEFAULT_TARGET
    reference_frame: str = DEFAULT_REFERENCE_FRAME
    target_frame: str = DEFAULT_REFERENCE_FRAME
    aberration_correction: str = DEFAULT_ABERRATION_CORRECTION
    direction_frame: str = DEFAULT_DIRECTION_FRAME
    half_horiz_deg: float = DEFAULT_HALF_HORIZ_DEG
    half_vert_deg: float = DEFAULT_HALF_VERT_DEG
    samples_per_edge: int = DEFAULT_SAMPLES_PER_EDGE


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise FootprintConfigError(f"Environment variable {name} must be a number, got {raw!r}") from exc


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise FootprintConfigError(f"Environment variable {name} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True)
class WgcSettings:
    """Connection and polling settings for the WebGeocalc client.

    ``poll_interval_s * max_poll_attempts`` bounds how long a single ray
    may wait for its job to finish.
    """

    base_url: str = DEFAULT_WGC_URL
    poll_interval_s: float = DEFAULT_POLL_INTERVAL_S
    max_poll_attempts: int = DEFAULT_MAX_POLL_ATTEMPTS
    request_timeout_s: float = DEFAULT_REQUEST_TIMEOUT_S
    debug_payloads: bool = False

    @classmethod
    def from_env(cls) -> "WgcSettings":
        """Build settings from ``WGC_*`` environment variables.

        Raises:
            FootprintConfigError: If a value cannot be parsed or is out of
                range, so a bad deployment fails before any request.
        """
        settings = cls(
            base_url=(os.getenv("WGC_URL") or DEFAULT_WGC_URL).rstrip("/"),
            poll_interval_s=_env_float("WGC_POLL_INTERVAL_S", DEFAULT_POLL_INTERVAL_S),
            max_poll_attempts=_env_int("WGC_MAX_POLL_ATTEMPTS", DEFAULT_MAX_POLL_ATTEMPTS),
            request_timeout_s=_env_float("WGC_REQUEST_TIMEOUT_S", DEFAULT_REQUEST_TIMEOUT_S),
            debug_payloads=bool(os.getenv("WGC_DEBUG")),
        )
        if not math.isfinite(settings.poll_interval_s) or settings.poll_interval_s < 0:
            raise FootprintConfigError(
                f"WGC_POLL_INTERVAL_S must be a finite number >= 0, got {settings.poll_interval_s}"
            )
        if settings.max_poll_attempts < 1:
            raise FootprintConfigError(
                f"WGC_MAX_POLL_ATTEMPTS must be >= 1, got {settings.max_poll_attempts}"
            )
        if not math.isfinite(settings.request_timeout_s) or settings.request_timeout_s <= 0:
            raise FootprintConfigError(
                f"WGC_REQUEST_TIMEOUT_S must be a finite number > 0, got {settings.request_timeout_s}"
            )
        return settings


def validate_footprint_params(params: FootprintParams) -> None:
    """Reject invalid parameters before any remote call is made.

    Raises:
        FootprintConfigError: If the time instant is missing, a
            half‑angle is not a finite value in ``(0, 90)`` degrees, the
            sampling density is below one or the kernel set id is not
            positive.
    """
    if not params.utc or not str(params.utc).strip():
        raise FootprintConfigError("A UTC time instant is required")
    for name, value in (
        ("halfHorizDeg", params.half_horiz_deg),
        ("halfVertDeg", params.half_vert_deg),
    ):
        if not isinstance(value, (int, float)) or isinstance(value, bool) or not math.isfinite(value):
            raise FootprintConfigError(f"{name} must be a finite number, got {value!r}")
        if value <= 0.0 or value >= 90.0:
            raise FootprintConfigError(f"{name} must be in (0, 90) degrees, got {value}")
    if not isinstance(params.samples_per_edge, int) or params.samples_per_edge < 1:
        raise FootprintConfigError(
            f"samplesPerEdge must be an integer >= 1, got {params.samples_per_edge!r}"
        )
    if params.kernel_set_id <= 0:
        raise FootprintConfigError(f"kernelSetId must be positive, got {params.kernel_set_id}")


def parse_observer(raw: Optional[str]) -> Union[str, int]:
    """Return a NAIF id as ``int`` when *raw* is numeric, else the name."""
    if raw is None or not raw.strip():
        return DEFAULT_OBSERVER
    text = raw.strip()
    try:
        return int(text)
    except ValueError:
        return text
