"""
Footprint assembly.

The assembler traces the instrument field of view with boundary rays,
asks WebGeocalc for the surface intercept of every ray and stitches the
successful intercepts into an ordered boundary loop in metres.  Rays
are resolved one at a time; a failed ray is logged, recorded as a
:class:`~footprint.services.errors.RayFailure` and skipped so that the
remaining rays still contribute.  The computation only fails as a whole
when fewer than three intercepts survive.

:func:`compute_footprint` adds the fan triangulation and the perimeter
to produce the complete :class:`FootprintResult`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Tuple

from .config import FootprintParams, validate_footprint_params
from .errors import FootprintError, InsufficientInterceptsError, RayFailure
from .fov_rays import CalculationRequest, build_intercept_request, generate_fov_boundary_rays
from .triangulation import boundary_perimeter, fan_triangle_indices, triangulate_fan
from .wgc_results import InterceptPointKm, parse_intercept_point

if TYPE_CHECKING:
    from .wgc_client import WgcClient

logger = logging.getLogger(__name__)

# Minimum number of intercepts needed to form a polygon.
MIN_BOUNDARY_POINTS = 3

Point3 = Tuple[float, float, float]


@dataclass
class BoundaryResult:
    """Ordered boundary in metres plus bookkeeping about the rays."""

    boundary: List[Point3]
    ray_count: int
    failures: List[RayFailure] = field(default_factory=list)


@dataclass
class FootprintResult:
    """Complete footprint: boundary, fan mesh and perimeter (all metres)."""

    boundary: List[Point3]
    triangles: List[float]
    indices: List[int]
    perimeter_m: float
    ray_count: int
    failures: List[RayFailure] = field(default_factory=list)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles) // 9


def _intercept_for_ray(client: "WgcClient", request: CalculationRequest) -> InterceptPointKm:
    payload = client.run_calculation(request)
    return parse_intercept_point(payload)


def compute_footprint_boundary(params: FootprintParams, client: "WgcClient") -> BoundaryResult:
    """Resolve every boundary ray and return the surviving intercepts.

    Args:
        params: Validated footprint parameters.
        client: Object exposing ``run_calculation(request)``; normally a
            :class:`~footprint.services.wgc_client.WgcClient`.

    Returns:
        A :class:`BoundaryResult` whose points follow ray‑generation
        order, converted from kilometres to metres.

    Raises:
        InsufficientInterceptsError: If fewer than three rays succeed.
    """
    rays = generate_fov_boundary_rays(
        params.half_horiz_deg, params.half_vert_deg, params.samples_per_edge
    )
    intercepts: List[InterceptPointKm] = []
    failures: List[RayFailure] = []

    for index, ray in enumerate(rays):
        request = build_intercept_request(params, ray)
        try:
            intercepts.append(_intercept_for_ray(client, request))
        except FootprintError as exc:
            logger.warning(
                "[WGC2] Failed to fetch intercept for ray %d (%.4f, %.4f, %.4f): %s",
                index,
                ray.x,
                ray.y,
                ray.z,
                exc.message,
            )
            failures.append(
                RayFailure(index=index, direction=ray.as_tuple(), kind=exc.kind, message=exc.message)
            )

    logger.info("Footprint rays resolved: %d/%d succeeded", len(intercepts), len(rays))
    if len(intercepts) < MIN_BOUNDARY_POINTS:
        raise InsufficientInterceptsError(len(intercepts), len(rays), failures)

    boundary = [p.to_meters() for p in intercepts]
    return BoundaryResult(boundary=boundary, ray_count=len(rays), failures=failures)


def compute_footprint(params: FootprintParams, client: "WgcClient") -> FootprintResult:
    """Compute the footprint boundary, its fan mesh and its perimeter.

    Parameters are validated before any remote call is made, so a
    :class:`~footprint.services.errors.FootprintConfigError` never costs a
    network round trip.
    """
    validate_footprint_params(params)
    result = compute_footprint_boundary(params, client)
    triangles = triangulate_fan(result.boundary)
    perimeter = boundary_perimeter(result.boundary)
    logger.info(
        "Footprint assembled: %d boundary points, %d triangles, perimeter %.3f m",
        len(result.boundary),
        len(triangles) // 9,
        perimeter,
    )
    return FootprintResult(
        boundary=result.boundary,
        triangles=triangles,
        indices=fan_triangle_indices(len(result.boundary)),
        perimeter_m=perimeter,
        ray_count=result.ray_count,
        failures=result.failures,
    )
