"""
Service/topo_modules/validator.py

최종 Topology 의 불변식(아크 길이, 링 폐합, 참조 범위)을 검증하고 리스크 요소를 로깅하는 품질 보증(QA) 모듈입니다.
"""
from __future__ import annotations

from typing import List

import networkx as nx

from Common.log import Log
from Service.topo_modules.expand import to_shape
from Service.topo_modules.topology.model import TopoGeometry, Topology


class ResultValidator:
    """
    데이터를 변경하지 않고 분석 결과만 로그로 출력합니다. 발견한 문제 목록을 반환합니다.
    """

    def __init__(self, logger: Log):
        self._logger = logger

    def execute(self, topology: Topology) -> List[str]:
        self._logger.log("=== 최종 Topology 품질 검증(QA) 시작 ===", level="INFO")
        errors: List[str] = []

        self._check_arcs(topology, errors)
        for name, geom in topology.objects.items():
            self._check_geometry(topology, name, geom, errors)
        self._check_junction_graph(topology)

        if errors:
            self._logger.log(f"[Validator] 검증 완료: {len(errors)}개의 잠재적 위험 요소가 발견되었습니다.", level="WARNING")
            for err in errors[:5]:
                self._logger.log(f"  - {err}", level="WARNING")
        else:
            self._logger.log("[Validator] 검증 완료: 모든 품질 기준을 통과했습니다.", level="INFO")
        return errors

    def _check_arcs(self, topology: Topology, errors: List[str]) -> None:
        for i, arc in enumerate(topology.arcs):
            if len(arc) < 2:
                errors.append(f"아크 {i} 의 점 개수가 2개 미만입니다.")

    def _check_geometry(self, topology: Topology, name: str, geom: TopoGeometry, errors: List[str]) -> None:
        if geom.type == "GeometryCollection":
            for child in geom.geometries or []:
                self._check_geometry(topology, name, child, errors)
            return

        for refs in geom.iter_rings():
            for ref in refs:
                if not 0 <= ref.index < len(topology.arcs):
                    errors.append(f"[{name}] 아크 참조 {ref.index} 가 범위를 벗어났습니다.")
                    return

        shape_ready = bool(geom.polygons())
        for polygon in geom.polygons():
            for ring in polygon:
                points = topology.chain_points(ring)
                if points and points[0] != points[-1]:
                    errors.append(f"[{name}] 링이 시작점으로 돌아오지 않습니다 (id={geom.id}).")
                if len(points) < 4:
                    shape_ready = False

        if shape_ready:
            shp = to_shape(topology, geom)
            if shp is not None and not shp.is_valid:
                self._logger.log(f"[Validator] [{name}] 유효하지 않은 폴리곤 (id={geom.id})", level="DEBUG")

    def _check_junction_graph(self, topology: Topology) -> None:
        """아크 끝점(분기점)을 노드로 하는 그래프의 연결 요소 수를 기록합니다."""
        graph = nx.MultiGraph()
        for i, arc in enumerate(topology.arcs):
            if len(arc) >= 2:
                graph.add_edge(tuple(arc[0]), tuple(arc[-1]), key=i)

        if graph.number_of_nodes() == 0:
            return

        components = nx.number_connected_components(graph)
        degrees = [d for _, d in graph.degree()]
        self._logger.log(
            f"[Validator] 분기점 그래프: 노드={graph.number_of_nodes()} 아크={graph.number_of_edges()} "
            f"그룹={components} 교차(D3+)={sum(1 for d in degrees if d >= 3)}",
            level="INFO",
        )
