"""
Service/topo_modules/simplify/areas.py

평면(cartesian) 및 구면(spherical) 좌표계에서 삼각형/링 면적을 계산하는 모듈입니다.
"""
from __future__ import annotations

import math
from typing import Sequence, Tuple

from Service.topo_modules.topology.model import Point

# 세 단위 벡터의 행렬식이 이 값 이하이면 같은 대원 위의 점으로 봅니다.
COPLANAR_EPSILON = 1e-15


def planar_ring_area(ring: Sequence[Point]) -> float:
    """신발끈 공식으로 부호 있는 면적을 계산합니다. (y 축 위쪽 기준 반시계 방향이 양수)"""
    area = 0.0
    n = len(ring)
    if n < 3:
        return 0.0
    x0, y0 = ring[-1]
    for x1, y1 in ring:
        area += x0 * y1 - x1 * y0
        x0, y0 = x1, y1
    return area / 2


def planar_triangle_area(a: Point, b: Point, c: Point) -> float:
    return abs((a[0] - c[0]) * (b[1] - a[1]) - (a[0] - b[0]) * (c[1] - a[1])) / 2


def spherical_ring_area(ring: Sequence[Point]) -> float:
    """경위도(도 단위) 링의 부호 있는 구면 초과(spherical excess)를 스테라디안으로 반환합니다."""
    if len(ring) < 3:
        return 0.0

    total = 0.0
    lon0, lat0 = ring[-1]
    lam0 = math.radians(lon0)
    phi0 = math.radians(lat0) / 2 + math.pi / 4
    cos0, sin0 = math.cos(phi0), math.sin(phi0)

    for lon, lat in ring:
        lam = math.radians(lon)
        phi = math.radians(lat) / 2 + math.pi / 4
        dlam = lam - lam0
        cos1, sin1 = math.cos(phi), math.sin(phi)
        k = sin0 * sin1
        u = cos0 * cos1 + k * math.cos(dlam)
        v = k * math.sin(dlam)
        total += math.atan2(v, u)
        lam0, cos0, sin0 = lam, cos1, sin1

    return 2 * total


def _unit_vector(point: Point) -> Tuple[float, float, float]:
    lam, phi = math.radians(point[0]), math.radians(point[1])
    cos_phi = math.cos(phi)
    return (cos_phi * math.cos(lam), cos_phi * math.sin(lam), math.sin(phi))


def spherical_triangle_area(a: Point, b: Point, c: Point) -> float:
    """세 점이 한 대원 위에 있으면 반올림 오차 대신 정확히 0 을 반환합니다."""
    (ax, ay, az), (bx, by, bz), (cx, cy, cz) = _unit_vector(a), _unit_vector(b), _unit_vector(c)
    det = ax * (by * cz - bz * cy) - ay * (bx * cz - bz * cx) + az * (bx * cy - by * cx)
    if abs(det) <= COPLANAR_EPSILON:
        return 0.0
    return abs(spherical_ring_area([a, b, c]))


class CoordinateSystem:
    """좌표계 이름에 따라 면적 함수를 선택합니다."""

    def __init__(self, name: str):
        if name not in ("cartesian", "spherical"):
            raise ValueError(f"알 수 없는 좌표계입니다: {name}")
        self.name = name

    def triangle_area(self, a: Point, b: Point, c: Point) -> float:
        if self.name == "spherical":
            return spherical_triangle_area(a, b, c)
        return planar_triangle_area(a, b, c)

    def ring_area(self, ring: Sequence[Point]) -> float:
        """링의 절대 면적입니다."""
        if self.name == "spherical":
            return abs(spherical_ring_area(ring))
        return abs(planar_ring_area(ring))
