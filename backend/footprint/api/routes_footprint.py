"""
API route for sensor footprint computation.

``GET /api/footprint`` traces the PolyCam field of view on Bennu at the
requested instant.  Every query parameter is optional; omitted values
fall back to the deployment defaults in
:mod:`footprint.services.config`.  The WebGeocalc client is supplied by
the :func:`get_wgc_client` dependency so tests can replace it.

Failures are returned as JSON ``{error, kind, statusCode, details}``
with the status code attached to the error, so clients can tell an
unreachable upstream from a rejected calculation or a footprint with
too few intercepts.
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from .models import ErrorResponse, FootprintResponse, RayFailureInfo, Vertex
from ..services.config import (
    DEFAULT_HALF_HORIZ_DEG,
    DEFAULT_HALF_VERT_DEG,
    DEFAULT_KERNEL_SET_ID,
    DEFAULT_SAMPLES_PER_EDGE,
    DEFAULT_UTC,
    FootprintParams,
    ShapeModel,
    StateRepresentation,
    WgcSettings,
    parse_observer,
)
from ..services.errors import FootprintError
from ..services.footprint import compute_footprint
from ..services.wgc_client import WgcClient

logger = logging.getLogger(__name__)

router = APIRouter()


def get_wgc_client() -> Iterator[WgcClient]:
    """Yield a WebGeocalc client configured from the environment."""
    with WgcClient(WgcSettings.from_env()) as client:
        yield client


@router.get(
    "/footprint",
    response_model=FootprintResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    },
)
async def get_footprint(
    utc: str = Query(DEFAULT_UTC, description="Observation instant (ISO‑8601 UTC)"),
    kernelSetId: int = Query(DEFAULT_KERNEL_SET_ID, description="WebGeocalc kernel set id"),
    shape: ShapeModel = Query(ShapeModel.DSK, description="Target shape model"),
    stateRepresentation: StateRepresentation = Query(
        StateRepresentation.RECTANGULAR, description="Coordinate representation"
    ),
    observer: Optional[str] = Query(None, description="Observer name or NAIF id"),
    halfHorizDeg: float = Query(DEFAULT_HALF_HORIZ_DEG, description="Horizontal FOV half‑angle (degrees)"),
    halfVertDeg: float = Query(DEFAULT_HALF_VERT_DEG, description="Vertical FOV half‑angle (degrees)"),
    samplesPerEdge: int = Query(DEFAULT_SAMPLES_PER_EDGE, description="Rays sampled per FOV edge"),
    client: WgcClient = Depends(get_wgc_client),
):
    """Compute the footprint boundary, fan mesh and perimeter."""
    params = FootprintParams(
        utc=utc,
        kernel_set_id=kernelSetId,
        shape=shape,
        state_representation=stateRepresentation,
        observer=parse_observer(observer),
        half_horiz_deg=halfHorizDeg,
        half_vert_deg=halfVertDeg,
        samples_per_edge=samplesPerEdge,
    )
    try:
        # The client blocks on HTTP and poll sleeps; keep it off the event loop.
        result = await run_in_threadpool(compute_footprint, params, client)
    except FootprintError as exc:
        logger.error("footprint request failed (%s): %s", exc.kind, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
    except Exception as exc:
        logger.exception("footprint endpoint error: %s", exc)
        return JSONResponse(
            status_code=500,
            content={
                "error": str(exc) or "Unknown error occurred",
                "kind": "internal",
                "statusCode": 500,
                "details": None,
            },
        )

    return FootprintResponse(
        boundaryMeters=[Vertex(x=p[0], y=p[1], z=p[2]) for p in result.boundary],
        trianglesMeters=result.triangles,
        boundaryIndices=result.indices,
        boundaryPointCount=len(result.boundary),
        triangleCount=result.triangle_count,
        perimeterMeters=result.perimeter_m,
        rayCount=result.ray_count,
        failedRays=[RayFailureInfo(**f.to_dict()) for f in result.failures],
    )
