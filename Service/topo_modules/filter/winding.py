"""
Service/topo_modules/filter/winding.py

폴리곤 링의 감김 방향을 외곽=시계 방향, 구멍=반시계 방향으로 정규화하는 모듈입니다.
"""
from __future__ import annotations

from typing import List

from Common.log import Log
from Service.topo_modules.simplify.areas import planar_ring_area
from Service.topo_modules.topology.model import ArcRef, TopoGeometry, Topology


class WindingNormalizer:
    """
    아크를 펼친 좌표로 부호 있는 면적을 계산하여 방향이 맞지 않는 링만 뒤집습니다.
    뒤집기는 참조 순서를 역순으로 바꾸고 각 참조의 방향을 반전하는 것으로, 공유 아크 테이블은 변경하지 않습니다.
    """

    def __init__(self, logger: Log):
        self._logger = logger

    def execute(self, topology: Topology) -> int:
        reversed_count = 0
        for geom in topology.objects.values():
            reversed_count += self._normalize(topology, geom)

        self._logger.log(f"[Topology:Winding] 감김 방향 정규화 완료: {reversed_count}개 링 반전", level="INFO")
        return reversed_count

    def _normalize(self, topology: Topology, geom: TopoGeometry) -> int:
        if geom.type == "GeometryCollection":
            return sum(self._normalize(topology, child) for child in geom.geometries or [])

        count = 0
        for polygon in geom.polygons():
            for r, ring in enumerate(polygon):
                area = planar_ring_area(topology.chain_points(ring))
                # 외곽 링은 음수(시계), 구멍은 양수(반시계)가 되어야 합니다.
                wrong = area > 0 if r == 0 else area < 0
                if wrong:
                    polygon[r] = reverse_ring(ring)
                    count += 1
        return count


def reverse_ring(ring: List[ArcRef]) -> List[ArcRef]:
    return [ref.flip() for ref in reversed(ring)]
