"""
Service/topo_modules/filter/__init__.py

감김 방향 정규화와 최소 면적 필터 관련 모듈들을 외부로 노출합니다.
"""
from .processor import TopologyFilter
from .winding import WindingNormalizer, reverse_ring
from .pruners import AreaFilter, ArcPruner

__all__ = [
    "TopologyFilter",
    "WindingNormalizer",
    "reverse_ring",
    "AreaFilter",
    "ArcPruner",
]
