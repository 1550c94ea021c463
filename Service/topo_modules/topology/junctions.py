"""
Service/topo_modules/topology/junctions.py

좌표 해시 테이블로 둘 이상의 링/라인이 공유하는 분기점(junction)을 찾는 모듈입니다.
"""
from __future__ import annotations

from typing import Dict, List, Set, Tuple

from Common.log import Log

from .extractor import Chain
from .model import Point


class JunctionDetector:
    """
    양자화된 좌표를 키로 하는 해시 테이블에 각 점의 이웃 쌍을 기록합니다.
    같은 점이 다른 이웃 쌍(정방향/역방향 모두 불일치)으로 다시 나타나면 분기점입니다.
    열린 라인의 양 끝점은 항상 분기점이며, 분기점이 하나도 없는 링은 시작점을 강제 분기점으로 지정합니다.
    공간 인덱스 없이 정수 좌표의 정확한 동일성만 사용합니다.
    """

    def __init__(self, logger: Log):
        self._logger = logger

    def execute(self, chains: List[Chain]) -> Set[Point]:
        junctions: Set[Point] = set()
        neighbors: Dict[Point, Tuple[Point, Point]] = {}
        visited: Dict[Point, int] = {}

        for ci, chain in enumerate(chains):
            points = chain.points
            if chain.closed:
                ring = points[:-1]
                n = len(ring)
                for i in range(n):
                    self._sequence(ci, ring[i - 1], ring[i], ring[(i + 1) % n], neighbors, visited, junctions)
            else:
                junctions.add(points[0])
                junctions.add(points[-1])
                for i in range(1, len(points) - 1):
                    self._sequence(ci, points[i - 1], points[i], points[i + 1], neighbors, visited, junctions)

        forced = 0
        for chain in chains:
            if not chain.closed:
                continue
            if not any(p in junctions for p in chain.points):
                junctions.add(chain.points[0])
                forced += 1

        self._logger.log(
            f"[Topology:Junctions] 분기점 탐지 완료: {len(junctions)}개 (고립 링 강제 분기점 {forced}개, 고유 좌표 {len(neighbors)}개)",
            level="INFO",
        )
        return junctions

    @staticmethod
    def _sequence(
        chain_index: int,
        previous: Point,
        current: Point,
        following: Point,
        neighbors: Dict[Point, Tuple[Point, Point]],
        visited: Dict[Point, int],
        junctions: Set[Point],
    ) -> None:
        # 같은 링/라인 안에서 다시 지나가는 점(자기 접촉)은 무시합니다.
        if visited.get(current) == chain_index:
            return
        visited[current] = chain_index

        known = neighbors.get(current)
        if known is None:
            neighbors[current] = (previous, following)
            return

        if known != (previous, following) and known != (following, previous):
            junctions.add(current)
