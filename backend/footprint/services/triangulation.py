"""
Fan triangulation and perimeter of an ordered footprint boundary.

The footprint boundary is a closed loop of 3D points in metres.  For
overlay rendering it is turned into a triangle fan anchored at the
first point: ``(p0, p[i], p[i+1])`` for ``i`` in ``1 .. n-2``.  This is
exact for convex loops; concave or self‑intersecting loops are fanned
as‑is and may produce overlapping triangles.
"""

from __future__ import annotations

from typing import List, Sequence

import numpy as np

from .errors import InsufficientVerticesError


def _as_points(boundary: Sequence[Sequence[float]]) -> np.ndarray:
    pts = np.asarray(boundary, dtype=np.float64)
    if pts.size == 0:
        return pts.reshape(0, 3)
    return pts.reshape(-1, 3)


def fan_triangle_indices(vertex_count: int) -> List[int]:
    """Index buffer for a triangle fan over *vertex_count* vertices.

    Returns an empty list when fewer than three vertices are given.
    """
    indices: List[int] = []
    for i in range(1, vertex_count - 1):
        indices.extend((0, i, i + 1))
    return indices


def triangulate_fan(boundary: Sequence[Sequence[float]]) -> List[float]:
    """Fan‑triangulate an ordered boundary into a flat triangle list.

    Args:
        boundary: Ordered boundary points ``(x, y, z)``.

    Returns:
        Flat list ``[x0, y0, z0, x1, y1, z1, x2, y2, z2, ...]`` holding
        ``3 * (n - 2)`` vertices, three per triangle.

    Raises:
        InsufficientVerticesError: If the boundary has fewer than three
            points.
    """
    pts = _as_points(boundary)
    n = len(pts)
    if n < 3:
        raise InsufficientVerticesError(
            f"Insufficient vertices for triangulation: {n}. Need at least 3.",
            details={"vertexCount": n},
        )
    anchor = np.broadcast_to(pts[0], (n - 2, 3))
    triangles = np.stack([anchor, pts[1:-1], pts[2:]], axis=1)
    return triangles.reshape(-1).tolist()


def boundary_perimeter(boundary: Sequence[Sequence[float]]) -> float:
    """Length of the closed loop through *boundary*, last point back to first.

    A loop needs at least three vertices to enclose an area; fewer
    points (a single point or a two‑point segment) yield ``0.0``.
    """
    pts = _as_points(boundary)
    if len(pts) < 3:
        return 0.0
    edges = np.roll(pts, -1, axis=0) - pts
    return float(np.linalg.norm(edges, axis=1).sum())
