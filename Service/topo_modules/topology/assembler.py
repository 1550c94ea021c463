"""
Service/topo_modules/topology/assembler.py

각 입력 geometry 의 좌표 배열을 아크 참조 배열로 치환하여 최종 Topology 를 조립하는 모듈입니다.
"""
from __future__ import annotations

from typing import Dict, List, Mapping, Optional

from Common.log import Log

from .extractor import SourceGeometry
from .model import ArcRef, BBox, Point, TopoGeometry, Topology, Transform


class TopologyAssembler:
    """
    입력과 구조적으로 동형인 TopoGeometry 트리를 새로 만들어 원래 이름 아래에 연결합니다.
    원본 입력 객체는 변경하지 않습니다.
    """

    def __init__(self, logger: Log):
        self._logger = logger

    def execute(
        self,
        sources: Mapping[str, SourceGeometry],
        arcs: List[List[Point]],
        refs_by_chain: List[List[ArcRef]],
        transform: Transform,
        bbox: Optional[BBox],
        coordinate_system: str,
    ) -> Topology:
        objects: Dict[str, TopoGeometry] = {}
        for name, source in sources.items():
            objects[name] = self._assemble(source, refs_by_chain)

        self._logger.log(f"[Topology:Assembler] 조립 완료: 객체 {len(objects)}개, 아크 {len(arcs)}개", level="INFO")
        return Topology(
            arcs=arcs,
            objects=objects,
            transform=transform,
            bbox=bbox,
            coordinate_system=coordinate_system,
        )

    def _assemble(self, source: SourceGeometry, refs_by_chain: List[List[ArcRef]]) -> TopoGeometry:
        geom = TopoGeometry(type=source.type, id=source.id, properties=source.properties)
        gtype = source.type

        if gtype == "GeometryCollection":
            geom.geometries = [self._assemble(member, refs_by_chain) for member in source.geometries or []]
        elif gtype == "Point":
            geom.coordinates = source.coordinates
        elif gtype == "MultiPoint":
            geom.coordinates = list(source.coordinates)
        elif gtype == "LineString":
            geom.arcs = list(refs_by_chain[source.chains])
        elif gtype in ("MultiLineString", "Polygon"):
            geom.arcs = [list(refs_by_chain[c]) for c in source.chains]
        elif gtype == "MultiPolygon":
            geom.arcs = [[list(refs_by_chain[c]) for c in polygon] for polygon in source.chains]
        return geom
