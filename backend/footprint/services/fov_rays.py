"""
Boundary ray generation and per‑ray calculation requests.

The instrument boresight is taken as the local +Z axis of the
instrument frame.  A rectangular field of view with half‑angles
``(h, v)`` is traced by walking its four edges in a fixed order –
bottom (left to right), right (bottom to top), top (right to left) and
left (top to bottom).  Each sample at angle ``a`` along an edge maps to
the direction ``(tan(a_x), tan(a_y), 1)`` which is then normalised.
Shared corners are emitted exactly once, so ``samples_per_edge``
samples per edge yield ``4 * samples_per_edge`` rays in total.

The second half of the module turns one ray into the WebGeocalc
``SURFACE_INTERCEPT_POINT`` request payload.  Both helpers are pure:
they never touch the network and assume parameters were validated by
:func:`~footprint.services.config.validate_footprint_params`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple, Union

from .config import FootprintParams


@dataclass(frozen=True)
class RayDirection:
    """Unit direction vector in the instrument frame."""

    x: float
    y: float
    z: float

    @classmethod
    def from_angles(cls, ax_rad: float, ay_rad: float) -> "RayDirection":
        """Map edge angles to a unit vector on the boresight‑centred plane."""
        tx = math.tan(ax_rad)
        ty = math.tan(ay_rad)
        norm = math.sqrt(tx * tx + ty * ty + 1.0)
        return cls(x=tx / norm, y=ty / norm, z=1.0 / norm)

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)


def generate_fov_boundary_rays(
    half_horiz_deg: float,
    half_vert_deg: float,
    samples_per_edge: int,
) -> List[RayDirection]:
    """Return the ordered unit rays tracing a rectangular FOV boundary.

    Args:
        half_horiz_deg: Horizontal half‑angle in degrees (``> 0``).
        half_vert_deg: Vertical half‑angle in degrees (``> 0``).
        samples_per_edge: Number of samples per edge (``>= 1``).

    Returns:
        ``4 * samples_per_edge`` rays.  The first ray is the
        bottom‑left corner and successive rays walk the boundary
        counter‑clockwise when viewed along the boresight.
    """
    h = math.radians(half_horiz_deg)
    v = math.radians(half_vert_deg)
    n = samples_per_edge
    rays: List[RayDirection] = []

    # Bottom edge, both corners included.
    for i in range(n + 1):
        t = i / n
        rays.append(RayDirection.from_angles(-h + 2.0 * h * t, -v))
    # Right edge, bottom‑right corner already emitted.
    for i in range(1, n + 1):
        t = i / n
        rays.append(RayDirection.from_angles(h, -v + 2.0 * v * t))
    # Top edge, top‑right corner already emitted.
    for i in range(1, n + 1):
        t = i / n
        rays.append(RayDirection.from_angles(h - 2.0 * h * t, v))
    # Left edge, skipping top‑left and bottom‑left corners.
    for i in range(1, n):
        t = i / n
        rays.append(RayDirection.from_angles(-h, v - 2.0 * v * t))

    return rays


@dataclass(frozen=True)
class CalculationRequest:
    """One ``SURFACE_INTERCEPT_POINT`` job with an explicit direction vector.

    Instances are built fresh for every ray and are never modified after
    submission.  :meth:`to_payload` renders the WebGeocalc JSON body.
    """

    utc: str
    kernel_set_id: int
    observer: Union[str, int]
    target: str
    reference_frame: str
    target_frame: str
    aberration_correction: str
    shape: str
    state_representation: str
    direction_frame: str
    direction: RayDirection
    calculation_type: str = "SURFACE_INTERCEPT_POINT"
    time_system: str = "UTC"
    time_format: str = "CALENDAR"

    def to_payload(self) -> Dict[str, Any]:
        return {
            "calculationType": self.calculation_type,
            "kernels": [{"type": "KERNEL_SET", "id": self.kernel_set_id}],
            "times": [self.utc],
            "timeSystem": self.time_system,
            "timeFormat": self.time_format,
            "observer": self.observer,
            "target": self.target,
            "referenceFrame": self.reference_frame,
            "aberrationCorrection": self.aberration_correction,
            "shape1": self.shape,
            "targetFrame": self.target_frame,
            "directionVectorType": "VECTOR",
            "directionFrame": self.direction_frame,
            "directionVectorX": self.direction.x,
            "directionVectorY": self.direction.y,
            "directionVectorZ": self.direction.z,
            "vectorAbCorr": self.aberration_correction,
            "stateRepresentation": self.state_representation,
        }


def build_intercept_request(params: FootprintParams, ray: RayDirection) -> CalculationRequest:
    """Combine the fixed footprint parameters with one ray direction."""
    return CalculationRequest(
        utc=params.utc,
        kernel_set_id=params.kernel_set_id,
        observer=params.observer,
        target=params.target,
        reference_frame=params.reference_frame,
        target_frame=params.target_frame,
        aberration_correction=params.aberration_correction,
        shape=getattr(params.shape, "value", params.shape),
        state_representation=getattr(params.state_representation, "value", params.state_representation),
        direction_frame=params.direction_frame,
        direction=ray,
    )
