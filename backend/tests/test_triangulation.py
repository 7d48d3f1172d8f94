"""
Tests for the boundary fan triangulation and perimeter helpers.

These tests validate triangle counts, anchor sharing and vertex order
for simple synthetic boundaries, and the closed‑loop perimeter.
"""

from __future__ import annotations

import math
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from footprint.services.errors import InsufficientVerticesError
from footprint.services.triangulation import (
    boundary_perimeter,
    fan_triangle_indices,
    triangulate_fan,
)


def _triangles(flat: list[float]) -> list[list[tuple[float, float, float]]]:
    verts = [tuple(flat[i:i + 3]) for i in range(0, len(flat), 3)]
    return [verts[i:i + 3] for i in range(0, len(verts), 3)]


def _polygon(n: int, radius: float = 10.0) -> list[tuple[float, float, float]]:
    return [
        (radius * math.cos(2 * math.pi * i / n), radius * math.sin(2 * math.pi * i / n), 1.0 * i)
        for i in range(n)
    ]


def test_triangle_reproduces_its_three_points() -> None:
    boundary = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.5)]
    tris = _triangles(triangulate_fan(boundary))
    assert tris == [boundary]


def test_rectangle_gives_two_triangles_sharing_the_diagonal() -> None:
    p0, p1, p2, p3 = (0.0, 0.0, 0.0), (4.0, 0.0, 0.0), (4.0, 3.0, 0.0), (0.0, 3.0, 0.0)
    tris = _triangles(triangulate_fan([p0, p1, p2, p3]))
    assert tris == [[p0, p1, p2], [p0, p2, p3]]


@pytest.mark.parametrize("n", [5, 6, 8, 20])
def test_fan_has_n_minus_two_triangles_anchored_at_first_point(n: int) -> None:
    boundary = _polygon(n)
    flat = triangulate_fan(boundary)
    assert len(flat) == (n - 2) * 9
    tris = _triangles(flat)
    for i, tri in enumerate(tris, start=1):
        assert tri[0] == pytest.approx(boundary[0])
        assert tri[1] == pytest.approx(boundary[i])
        assert tri[2] == pytest.approx(boundary[i + 1])


@pytest.mark.parametrize("n", [0, 1, 2])
def test_too_few_vertices_raises(n: int) -> None:
    with pytest.raises(InsufficientVerticesError) as info:
        triangulate_fan(_polygon(n))
    assert str(n) in info.value.message
    assert info.value.kind == "result_too_sparse"


def test_fan_indices() -> None:
    assert fan_triangle_indices(2) == []
    assert fan_triangle_indices(3) == [0, 1, 2]
    assert fan_triangle_indices(5) == [0, 1, 2, 0, 2, 3, 0, 3, 4]


def test_perimeter_of_square_is_four_sides() -> None:
    s = 250.0
    square = [(0.0, 0.0, 0.0), (s, 0.0, 0.0), (s, s, 0.0), (0.0, s, 0.0)]
    assert boundary_perimeter(square) == pytest.approx(4 * s)


def test_perimeter_closes_the_loop_in_3d() -> None:
    boundary = [(0.0, 0.0, 0.0), (3.0, 0.0, 0.0), (3.0, 0.0, 4.0)]
    assert boundary_perimeter(boundary) == pytest.approx(3.0 + 4.0 + 5.0)


@pytest.mark.parametrize("boundary", [[], [(1.0, 2.0, 3.0)], [(0.0, 0.0, 0.0), (5.0, 0.0, 0.0)]])
def test_degenerate_perimeter_is_zero(boundary) -> None:
    assert boundary_perimeter(boundary) == 0.0
