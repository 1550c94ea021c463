"""
Service/topo_modules/expand.py

Topology 의 아크 참조를 원래 축척의 좌표로 펼쳐 GeoJSON/shapely 객체로 복원하는 모듈입니다.
"""
from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Sequence

from shapely.geometry import shape

from Service.topo_modules.topology.model import ArcRef, TopoGeometry, Topology

MeshPredicate = Callable[[TopoGeometry, TopoGeometry], bool]


def ring_coordinates(topology: Topology, refs: Sequence[ArcRef]) -> List[List[float]]:
    """참조 아크를 이어 붙인 뒤 변환을 적용한 좌표 목록입니다."""
    return [list(topology.transform.apply(p)) for p in topology.chain_points(refs)]


def geometry(topology: Topology, geom: TopoGeometry) -> Optional[Dict[str, Any]]:
    """TopoGeometry 하나를 GeoJSON geometry 로 변환합니다. null geometry 는 None 입니다."""
    gtype = geom.type
    if gtype is None:
        return None
    if gtype == "GeometryCollection":
        return {
            "type": gtype,
            "geometries": [g for g in (geometry(topology, child) for child in geom.geometries or []) if g is not None],
        }
    if gtype == "Point":
        return {"type": gtype, "coordinates": list(topology.transform.apply(geom.coordinates))}
    if gtype == "MultiPoint":
        return {"type": gtype, "coordinates": [list(topology.transform.apply(p)) for p in geom.coordinates]}
    if gtype == "LineString":
        return {"type": gtype, "coordinates": ring_coordinates(topology, geom.arcs)}
    if gtype in ("MultiLineString", "Polygon"):
        return {"type": gtype, "coordinates": [ring_coordinates(topology, refs) for refs in geom.arcs]}
    return {
        "type": gtype,
        "coordinates": [[ring_coordinates(topology, refs) for refs in polygon] for polygon in geom.arcs],
    }


def _feature(topology: Topology, geom: TopoGeometry) -> Dict[str, Any]:
    out: Dict[str, Any] = {"type": "Feature"}
    if geom.id is not None:
        out["id"] = geom.id
    out["properties"] = dict(geom.properties or {})
    out["geometry"] = geometry(topology, geom)
    return out


def feature(topology: Topology, name: str) -> Dict[str, Any]:
    """
    이름으로 지정한 객체를 GeoJSON 으로 복원합니다.
    GeometryCollection 은 FeatureCollection 으로, 그 외에는 Feature 로 반환합니다.
    """
    obj = topology.objects[name]
    if obj.type == "GeometryCollection":
        return {"type": "FeatureCollection", "features": [_feature(topology, g) for g in obj.geometries or []]}
    return _feature(topology, obj)


def to_shape(topology: Topology, geom: TopoGeometry):
    """TopoGeometry 를 shapely geometry 로 변환합니다."""
    data = geometry(topology, geom)
    if data is None:
        return None
    return shape(data)


def _leaf_geometries(geom: TopoGeometry) -> List[TopoGeometry]:
    if geom.type == "GeometryCollection":
        leaves: List[TopoGeometry] = []
        for child in geom.geometries or []:
            leaves.extend(_leaf_geometries(child))
        return leaves
    return [geom]


def mesh(topology: Topology, name: Optional[str] = None, predicate: Optional[MeshPredicate] = None) -> Dict[str, Any]:
    """
    아크들을 MultiLineString 으로 반환합니다.
    name 이 주어지면 해당 객체가 참조하는 아크만, predicate(a, b) 가 주어지면
    아크를 참조하는 첫/마지막 geometry 쌍이 조건을 만족하는 아크만 포함합니다.
    공유되지 않은 아크는 a 와 b 가 같은 geometry 입니다.
    """
    if name is None and predicate is None:
        indices = list(range(len(topology.arcs)))
    else:
        roots = [topology.objects[name]] if name is not None else list(topology.objects.values())
        geoms_by_arc: Dict[int, List[TopoGeometry]] = defaultdict(list)
        for root in roots:
            for leaf in _leaf_geometries(root):
                for refs in leaf.iter_rings():
                    for ref in refs:
                        owners = geoms_by_arc[ref.index]
                        if not owners or owners[-1] is not leaf:
                            owners.append(leaf)
        indices = sorted(
            i for i, owners in geoms_by_arc.items()
            if predicate is None or predicate(owners[0], owners[-1])
        )

    lines = [ring_coordinates(topology, [ArcRef(i)]) for i in indices]
    return {"type": "MultiLineString", "coordinates": lines}


def neighbors(geometries: Sequence[TopoGeometry]) -> List[List[int]]:
    """각 geometry 와 아크를 하나 이상 공유하는 다른 geometry 의 인덱스 목록입니다."""
    owners_by_arc: Dict[int, set] = defaultdict(set)
    for i, geom in enumerate(geometries):
        for refs in geom.iter_rings():
            for ref in refs:
                owners_by_arc[ref.index].add(i)

    result: List[set] = [set() for _ in geometries]
    for owners in owners_by_arc.values():
        for i in owners:
            result[i].update(j for j in owners if j != i)
    return [sorted(n) for n in result]
