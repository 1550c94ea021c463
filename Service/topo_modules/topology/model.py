"""
Service/topo_modules/topology/model.py

토폴로지 엔진 전 단계가 공유하는 자료 구조(아크 참조, 변환, 토폴로지 geometry)를 정의하는 모듈입니다.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

Point = Tuple[float, float]
BBox = Tuple[float, float, float, float]

LINE_TYPES = ("LineString", "MultiLineString")
POLYGON_TYPES = ("Polygon", "MultiPolygon")
POINT_TYPES = ("Point", "MultiPoint")
GEOMETRY_TYPES = POINT_TYPES + LINE_TYPES + POLYGON_TYPES + ("GeometryCollection",)


def detect_coordinate_system(bbox: Optional[BBox]) -> str:
    """bbox 가 경위도 범위 안에 있으면 구면 좌표계로 간주합니다."""
    if bbox is None:
        return "cartesian"
    x0, y0, x1, y1 = bbox
    if x0 >= -180 and x1 <= 180 and y0 >= -90 and y1 <= 90:
        return "spherical"
    return "cartesian"


@dataclass(frozen=True)
class ArcRef:
    """
    아크 테이블의 인덱스와 진행 방향을 명시적으로 담는 참조 값입니다.
    보수(~index) 표기는 직렬화 경계에서만 사용합니다.
    """
    index: int
    reversed: bool = False

    def flip(self) -> "ArcRef":
        return ArcRef(self.index, not self.reversed)

    def encode(self) -> int:
        return ~self.index if self.reversed else self.index

    @classmethod
    def decode(cls, value: int) -> "ArcRef":
        value = int(value)
        if value < 0:
            return cls(~value, True)
        return cls(value, False)


@dataclass(frozen=True)
class Transform:
    """양자화 격자 좌표를 원래 축척 좌표로 되돌리는 scale + translate 변환입니다."""
    scale: Tuple[float, float] = (1.0, 1.0)
    translate: Tuple[float, float] = (0.0, 0.0)

    def apply(self, point: Sequence[float]) -> Point:
        return (
            point[0] * self.scale[0] + self.translate[0],
            point[1] * self.scale[1] + self.translate[1],
        )

    def is_identity(self) -> bool:
        return self.scale == (1.0, 1.0) and self.translate == (0.0, 0.0)

    def to_dict(self) -> Dict[str, List[float]]:
        return {"scale": list(self.scale), "translate": list(self.translate)}


@dataclass
class TopoGeometry:
    """
    좌표 배열 대신 아크 참조 배열을 갖는 토폴로지 수준 geometry입니다.

    - LineString: List[ArcRef]
    - MultiLineString / Polygon: List[List[ArcRef]]
    - MultiPolygon: List[List[List[ArcRef]]]
    - Point / MultiPoint: coordinates 에 격자 좌표를 그대로 보관합니다.
    - type 이 None 이면 비어 있는(null) geometry 입니다.
    """
    type: Optional[str]
    arcs: Optional[list] = None
    coordinates: Optional[list] = None
    geometries: Optional[List["TopoGeometry"]] = None
    id: Any = None
    properties: Optional[Dict[str, Any]] = None

    def polygons(self) -> List[List[List[ArcRef]]]:
        """Polygon/MultiPolygon 을 동일한 '폴리곤 목록' 형태로 반환합니다."""
        if self.type == "Polygon":
            return [self.arcs]
        if self.type == "MultiPolygon":
            return list(self.arcs)
        return []

    def iter_rings(self):
        """하위 geometry 를 포함하여 모든 (폴리곤 링 또는 라인) 참조 목록을 순회합니다."""
        if self.type == "LineString":
            yield self.arcs
        elif self.type in ("MultiLineString", "Polygon"):
            yield from self.arcs
        elif self.type == "MultiPolygon":
            for polygon in self.arcs:
                yield from polygon
        elif self.type == "GeometryCollection":
            for child in self.geometries or []:
                yield from child.iter_rings()

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"type": self.type}
        if self.id is not None:
            out["id"] = self.id
        if self.properties:
            out["properties"] = dict(self.properties)
        if self.type == "GeometryCollection":
            out["geometries"] = [g.to_dict() for g in self.geometries or []]
        elif self.type in POINT_TYPES:
            out["coordinates"] = _plain(self.coordinates)
        elif self.type is not None:
            out["arcs"] = _encode_refs(self.arcs)
        return out


@dataclass
class Topology:
    """
    아크 테이블(절대 좌표), 이름별 geometry, 좌표 변환을 묶은 최종 산출물입니다.
    델타 인코딩은 to_dict() 시점에만 적용됩니다.
    """
    arcs: List[List[Point]]
    objects: Dict[str, TopoGeometry]
    transform: Transform = field(default_factory=Transform)
    bbox: Optional[BBox] = None
    coordinate_system: str = "cartesian"

    def arc_points(self, ref: ArcRef) -> List[Point]:
        points = self.arcs[ref.index]
        return list(reversed(points)) if ref.reversed else list(points)

    def chain_points(self, refs: Sequence[ArcRef]) -> List[Point]:
        """참조된 아크들을 순서대로 이어 붙이며, 맞닿는 교차점은 한 번만 포함합니다."""
        points: List[Point] = []
        for ref in refs:
            arc = self.arc_points(ref)
            if points:
                arc = arc[1:]
            points.extend(arc)
        return points

    def to_dict(self) -> Dict[str, Any]:
        from .delta import DeltaEncoder

        encoder = DeltaEncoder()
        out: Dict[str, Any] = {
            "type": "Topology",
            "objects": {name: geom.to_dict() for name, geom in self.objects.items()},
            "arcs": [encoder.encode(arc) for arc in self.arcs],
        }
        if self.bbox is not None:
            out["bbox"] = list(self.bbox)
        out["transform"] = self.transform.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any], coordinate_system: Optional[str] = None) -> "Topology":
        """
        직렬화된 TopoJSON 딕셔너리를 절대 좌표 아크를 갖는 Topology 로 복원합니다.
        coordinate_system 이 없으면 bbox (없으면 아크 좌표 범위)로 판정합니다.
        """
        from .delta import DeltaEncoder

        if data.get("type") != "Topology":
            raise ValueError(f"Topology 형식이 아닙니다: {data.get('type')}")

        raw_transform = data.get("transform")
        if raw_transform:
            transform = Transform(
                scale=(float(raw_transform["scale"][0]), float(raw_transform["scale"][1])),
                translate=(float(raw_transform["translate"][0]), float(raw_transform["translate"][1])),
            )
            arcs = [DeltaEncoder().decode(arc) for arc in data.get("arcs", [])]
        else:
            transform = Transform()
            arcs = [[(p[0], p[1]) for p in arc] for arc in data.get("arcs", [])]

        bbox = tuple(data["bbox"]) if data.get("bbox") else None
        if coordinate_system is None:
            coordinate_system = detect_coordinate_system(bbox or _arc_bounds(arcs, transform))
        objects = {name: _decode_geometry(obj) for name, obj in data.get("objects", {}).items()}
        return cls(arcs=arcs, objects=objects, transform=transform, bbox=bbox, coordinate_system=coordinate_system)


def _arc_bounds(arcs: List[List[Point]], transform: Transform) -> Optional[BBox]:
    points = [transform.apply(p) for arc in arcs for p in arc]
    if not points:
        return None
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return (min(xs), min(ys), max(xs), max(ys))


def _encode_refs(value):
    if isinstance(value, ArcRef):
        return value.encode()
    return [_encode_refs(v) for v in value]


def _decode_refs(value):
    if isinstance(value, list):
        return [_decode_refs(v) for v in value]
    return ArcRef.decode(value)


def _plain(value):
    if isinstance(value, tuple):
        return list(value)
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


def _decode_geometry(obj: Dict[str, Any]) -> TopoGeometry:
    gtype = obj.get("type")
    geom = TopoGeometry(type=gtype, id=obj.get("id"), properties=obj.get("properties"))
    if gtype == "GeometryCollection":
        geom.geometries = [_decode_geometry(g) for g in obj.get("geometries", [])]
    elif gtype == "Point":
        geom.coordinates = tuple(obj["coordinates"][:2])
    elif gtype == "MultiPoint":
        geom.coordinates = [tuple(p[:2]) for p in obj["coordinates"]]
    elif gtype is not None:
        geom.arcs = _decode_refs(obj.get("arcs", []))
    return geom
