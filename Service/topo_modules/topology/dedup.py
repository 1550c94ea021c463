"""
Service/topo_modules/topology/dedup.py

기하적으로 동일하거나 역방향인 아크를 하나의 정규 아크로 병합하여 공유 경계를 한 번만 저장하는 모듈입니다.
"""
from __future__ import annotations

from typing import Dict, List, Tuple

from Common.log import Log

from .model import ArcRef, Point


class ArcDeduplicator:
    """
    각 아크의 점 순서열(순서 민감 해시)을 정규 아크 테이블에서 정방향, 역방향 순으로 조회합니다.
    일치하면 해당 인덱스(역방향이면 reversed=True)로 대체하고, 없으면 새 정규 아크로 추가합니다.
    """

    def __init__(self, logger: Log):
        self._logger = logger

    def execute(self, slots: List[List[List[Point]]]) -> Tuple[List[List[Point]], List[List[ArcRef]]]:
        arcs: List[List[Point]] = []
        index_by_key: Dict[Tuple[Point, ...], int] = {}
        refs_by_chain: List[List[ArcRef]] = []
        total = 0

        for chain_slots in slots:
            refs: List[ArcRef] = []
            for arc in chain_slots:
                total += 1
                key = tuple(arc)

                index = index_by_key.get(key)
                if index is not None:
                    refs.append(ArcRef(index))
                    continue

                index = index_by_key.get(key[::-1])
                if index is not None:
                    refs.append(ArcRef(index, True))
                    continue

                index_by_key[key] = len(arcs)
                refs.append(ArcRef(len(arcs)))
                arcs.append(list(arc))
            refs_by_chain.append(refs)

        self._logger.log(f"[Topology:Dedup] 아크 병합 완료: {total}개 슬롯 -> {len(arcs)}개 정규 아크", level="INFO")
        return arcs, refs_by_chain
