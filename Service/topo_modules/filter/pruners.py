"""
Service/topo_modules/filter/pruners.py

면적 기준으로 작은 링/폴리곤/피처를 제거하고, 참조되지 않는 아크를 정리하는 정제 전략 모듈입니다.
"""
from __future__ import annotations

from collections import Counter
from typing import Dict, List, Optional

from Common.log import Log
from Service.topo_modules.simplify.areas import CoordinateSystem
from Service.topo_modules.topology.model import ArcRef, TopoGeometry, Topology


class AreaFilter:
    """
    링의 절대 면적이 최소 면적 미만이거나 서로 다른 점이 3개 미만이면 빈 링으로 보고 제거합니다.
    외곽 링이 제거되면 폴리곤 전체를, 비어버린 MultiPolygon 멤버와 geometry/피처를 상위로 연쇄 제거합니다.
    """

    def __init__(self, logger: Log):
        self._logger = logger

    def execute(
        self,
        topology: Topology,
        minimum_area: float,
        coordinate_system: Optional[str] = None,
        preserve_attached: bool = False,
    ) -> Dict[str, int]:
        system = CoordinateSystem(coordinate_system or topology.coordinate_system)
        attached = self._shared_arcs(topology) if preserve_attached else set()
        stats = {"rings": 0, "polygons": 0, "objects": 0}

        for name in list(topology.objects):
            kept = self._filter_geometry(topology, topology.objects[name], system, minimum_area, attached, stats)
            if kept is None:
                del topology.objects[name]
                stats["objects"] += 1

        self._logger.log(
            f"[Topology:AreaFilter] 최소 면적 {minimum_area} 미만 제거: "
            f"링={stats['rings']}, 폴리곤={stats['polygons']}, 객체={stats['objects']}",
            level="INFO",
        )
        return stats

    def _filter_geometry(self, topology, geom: TopoGeometry, system, minimum_area, attached, stats) -> Optional[TopoGeometry]:
        if geom.type is None:
            return None

        if geom.type == "GeometryCollection":
            members = []
            for child in geom.geometries or []:
                kept = self._filter_geometry(topology, child, system, minimum_area, attached, stats)
                if kept is not None:
                    members.append(kept)
            geom.geometries = members
            return geom if members else None

        if geom.type == "Polygon":
            geom.arcs = self._filter_polygon(topology, geom.arcs, system, minimum_area, attached, stats)
            if not geom.arcs:
                stats["polygons"] += 1
                return None
            return geom

        if geom.type == "MultiPolygon":
            polygons = []
            for polygon in geom.arcs:
                kept = self._filter_polygon(topology, polygon, system, minimum_area, attached, stats)
                if kept:
                    polygons.append(kept)
                else:
                    stats["polygons"] += 1
            geom.arcs = polygons
            return geom if polygons else None

        return geom

    def _filter_polygon(self, topology, polygon, system, minimum_area, attached, stats) -> List[List[ArcRef]]:
        if not polygon:
            return []

        exterior, holes = polygon[0], polygon[1:]
        if not self._keep_ring(topology, exterior, system, minimum_area, attached):
            stats["rings"] += 1 + len(holes)
            return []

        kept = [exterior]
        for ring in holes:
            if self._keep_ring(topology, ring, system, minimum_area, attached):
                kept.append(ring)
            else:
                stats["rings"] += 1
        return kept

    def _keep_ring(self, topology, ring, system, minimum_area, attached) -> bool:
        points = topology.chain_points(ring)
        if len(set(points)) < 3:
            return False
        if attached and any(ref.index in attached for ref in ring):
            return True
        coords = [topology.transform.apply(p) for p in points]
        return system.ring_area(coords) >= minimum_area

    @staticmethod
    def _shared_arcs(topology: Topology) -> set:
        """두 번 이상 폴리곤 링에서 참조되는 아크 인덱스 집합입니다."""
        counts: Counter = Counter()
        for geom in topology.objects.values():
            for polygon in _iter_polygons(geom):
                for ring in polygon:
                    counts.update(ref.index for ref in ring)
        return {index for index, n in counts.items() if n > 1}


class ArcPruner:
    """
    어떤 geometry 에서도 참조되지 않는 아크를 제거하고 남은 아크의 참조 인덱스를 재배열합니다.
    """

    def __init__(self, logger: Log):
        self._logger = logger

    def execute(self, topology: Topology) -> int:
        used: Dict[int, int] = {}
        for geom in topology.objects.values():
            for refs in geom.iter_rings():
                for ref in refs:
                    if ref.index not in used:
                        used[ref.index] = 0

        ordered = sorted(used)
        for new_index, old_index in enumerate(ordered):
            used[old_index] = new_index

        for geom in topology.objects.values():
            self._reindex(geom, used)

        removed = len(topology.arcs) - len(ordered)
        topology.arcs = [topology.arcs[i] for i in ordered]

        if removed:
            self._logger.log(f"[Topology:ArcPruner] 미사용 아크 {removed}개 제거", level="INFO")
        return removed

    def _reindex(self, geom: TopoGeometry, mapping: Dict[int, int]) -> None:
        if geom.type == "GeometryCollection":
            for child in geom.geometries or []:
                self._reindex(child, mapping)
        elif geom.type is not None and geom.arcs is not None:
            geom.arcs = _remap(geom.arcs, mapping)


def _remap(value, mapping: Dict[int, int]):
    if isinstance(value, ArcRef):
        return ArcRef(mapping[value.index], value.reversed)
    return [_remap(v, mapping) for v in value]


def _iter_polygons(geom: TopoGeometry):
    if geom.type == "GeometryCollection":
        for child in geom.geometries or []:
            yield from _iter_polygons(child)
    else:
        yield from geom.polygons()
