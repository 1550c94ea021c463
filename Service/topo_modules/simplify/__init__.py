"""
Service/topo_modules/simplify/__init__.py

위상 보존 단순화 및 좌표계별 면적 계산 모듈을 외부로 노출합니다.
"""
from .processor import TopologySimplifier
from .areas import CoordinateSystem, planar_ring_area, spherical_ring_area

__all__ = [
    "TopologySimplifier",
    "CoordinateSystem",
    "planar_ring_area",
    "spherical_ring_area",
]
