"""
Service/topo_modules/__init__.py

Topology 생성, 단순화, 필터링 파이프라인 구성에 필요한 주요 모듈들을 외부로 노출합니다.
"""
from .gis_io import GISIO
from .validator import ResultValidator
from .diagnostics import TopologyDiagnostics
from .topology import TopologyBuilder, Topology
from .simplify import TopologySimplifier
from .filter import TopologyFilter

__all__ = [
    "GISIO",
    "ResultValidator",
    "TopologyDiagnostics",
    "TopologyBuilder",
    "Topology",
    "TopologySimplifier",
    "TopologyFilter",
]
