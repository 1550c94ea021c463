"""
Service/topo_modules/topology/__init__.py

입력 geometry 를 공유 경계 기반 Topology 로 변환하는 생성 단계 모듈들을 외부로 노출합니다.
"""
from .processor import TopologyBuilder
from .model import ArcRef, TopoGeometry, Topology, Transform, detect_coordinate_system
from .extractor import GeometryExtractor, SourceGeometry, Chain
from .quantizer import Quantizer
from .junctions import JunctionDetector
from .cutter import ArcCutter
from .dedup import ArcDeduplicator
from .delta import DeltaEncoder
from .assembler import TopologyAssembler

__all__ = [
    "TopologyBuilder",
    "detect_coordinate_system",
    "ArcRef",
    "TopoGeometry",
    "Topology",
    "Transform",
    "GeometryExtractor",
    "SourceGeometry",
    "Chain",
    "Quantizer",
    "JunctionDetector",
    "ArcCutter",
    "ArcDeduplicator",
    "DeltaEncoder",
    "TopologyAssembler",
]
