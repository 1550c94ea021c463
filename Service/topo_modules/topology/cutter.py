"""
Service/topo_modules/topology/cutter.py

분기점을 기준으로 각 링/라인을 아크 슬롯 단위로 분할하는 모듈입니다.
"""
from __future__ import annotations

from typing import List, Set

from Common.log import Log
from Service.errors import InvalidGeometry

from .extractor import Chain
from .model import Point


class ArcCutter:
    """
    분기점에서 시작하여 링/라인을 따라가며 분기점을 만날 때마다 새 아크를 만듭니다.
    분기점은 인접한 두 아크가 공유하는 양 끝점으로 포함됩니다.
    """

    def __init__(self, logger: Log):
        self._logger = logger

    def execute(self, chains: List[Chain], junctions: Set[Point]) -> List[List[List[Point]]]:
        slots: List[List[List[Point]]] = []
        total = 0
        for chain in chains:
            arcs = self._cut(chain, junctions)
            total += len(arcs)
            slots.append(arcs)

        self._logger.log(f"[Topology:Cutter] 아크 분할 완료: {len(chains)}개 링/라인 -> {total}개 아크 슬롯", level="INFO")
        return slots

    def _cut(self, chain: Chain, junctions: Set[Point]) -> List[List[Point]]:
        points = chain.points
        if chain.closed:
            points = self._rotate_to_junction(chain, junctions)

        arcs: List[List[Point]] = []
        current = [points[0]]
        for p in points[1:]:
            current.append(p)
            if p in junctions:
                arcs.append(current)
                current = [p]
        if len(current) > 1:
            arcs.append(current)

        for arc in arcs:
            if len(arc) < 2:
                raise InvalidGeometry("아크가 2개 미만의 점으로 붕괴되었습니다.", owner=chain.owner, position=chain.position)
        if not arcs:
            raise InvalidGeometry("링/라인에서 아크를 만들 수 없습니다.", owner=chain.owner, position=chain.position)
        return arcs

    def _rotate_to_junction(self, chain: Chain, junctions: Set[Point]) -> List[Point]:
        """닫힌 링이 첫 번째 분기점에서 시작하도록 회전합니다."""
        ring = chain.points[:-1]
        for start, p in enumerate(ring):
            if p in junctions:
                rotated = ring[start:] + ring[:start]
                rotated.append(rotated[0])
                return rotated
        raise InvalidGeometry("링에 분기점이 없습니다.", owner=chain.owner, position=chain.position)
