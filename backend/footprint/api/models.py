"""
Pydantic data models for the footprint API.

These models define the shapes of the responses returned by the
backend.  The footprint geometry is expressed in metres in the target
body‑fixed frame; the triangle list is flattened so the frontend can
hand it straight to a vertex buffer.
"""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class Vertex(BaseModel):
    """Single 3D point on the footprint boundary (metres)."""

    x: float
    y: float
    z: float


class RayFailureInfo(BaseModel):
    """Summary of one boundary ray that produced no intercept."""

    index: int = Field(..., description="Position of the ray in generation order")
    direction: List[float] = Field(..., description="Unit ray direction in the instrument frame")
    kind: str = Field(..., description="Error classification for this ray")
    message: str = Field(..., description="Error message reported for this ray")


class FootprintResponse(BaseModel):
    """Response returned for a footprint request."""

    boundaryMeters: List[Vertex] = Field(
        ..., description="Ordered footprint boundary vertices in metres"
    )
    trianglesMeters: List[float] = Field(
        ..., description="Flat list of fan triangle vertices (x, y, z …), three vertices per triangle"
    )
    boundaryIndices: List[int] = Field(
        ..., description="Index buffer of the fan triangulation referencing boundaryMeters"
    )
    boundaryPointCount: int = Field(..., description="Number of boundary vertices")
    triangleCount: int = Field(..., description="Number of triangles in the fan mesh")
    perimeterMeters: float = Field(..., description="Closed boundary length in metres")
    rayCount: int = Field(..., description="Number of boundary rays sampled")
    failedRays: List[RayFailureInfo] = Field(
        default_factory=list,
        description="Rays skipped because their intercept could not be computed",
    )


class ErrorResponse(BaseModel):
    """Structured error body returned on failure."""

    error: str = Field(..., description="Human‑readable error message")
    kind: str = Field(..., description="Stable error classification")
    statusCode: int = Field(..., description="HTTP status associated with the error")
    details: Dict[str, Any] | None = Field(
        default=None, description="Optional upstream diagnostics"
    )
