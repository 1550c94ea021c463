"""
Service/topo_modules/topology/extractor.py

이종(heterogeneous) geometry 트리를 정규화하고, 링/라인 단위로 평탄화하여 역참조와 함께 추출하는 모듈입니다.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from Common.log import Log
from Service.errors import InvalidGeometry

from .model import GEOMETRY_TYPES, Point

IdFunc = Callable[[Dict[str, Any]], Any]
PropertyFilter = Callable[[str], Optional[str]]


@dataclass
class SourceGeometry:
    """
    입력 geometry 의 작업용 사본입니다. 원본 입력 객체는 변경하지 않습니다.
    chains 는 coordinates 와 같은 구조로 추출된 Chain 인덱스를 담습니다.
    """
    type: Optional[str]
    coordinates: Any = None
    geometries: Optional[List["SourceGeometry"]] = None
    id: Any = None
    properties: Optional[Dict[str, Any]] = None
    chains: Any = None


@dataclass
class Chain:
    """추출된 하나의 열린 라인 또는 닫힌 링입니다. (owner, position) 으로 원래 위치를 역참조합니다."""
    points: List[Point]
    closed: bool
    owner: int
    position: Tuple[int, ...]


def _default_id(feature: Dict[str, Any]) -> Any:
    return feature.get("id")


class GeometryExtractor:
    """
    GeoJSON 호환 객체(FeatureCollection, Feature, Geometry, __geo_interface__ 보유 객체)를
    SourceGeometry 트리로 정규화하고, 링/라인을 Chain 목록으로 추출합니다.
    링의 감김 방향은 이 단계에서 정규화하지 않습니다.
    """

    def __init__(self, logger: Log):
        self._logger = logger

    def normalize(
        self,
        objects: Mapping[str, Any],
        id_func: Optional[IdFunc] = None,
        property_filter: Optional[PropertyFilter] = None,
    ) -> Dict[str, SourceGeometry]:
        id_func = id_func or _default_id
        sources: Dict[str, SourceGeometry] = {}
        for name, obj in objects.items():
            sources[name] = self._normalize_object(obj, id_func, property_filter)
        return sources

    def extract(self, sources: Mapping[str, SourceGeometry]) -> List[Chain]:
        chains: List[Chain] = []
        owner_counter = [0]
        for source in sources.values():
            self._extract_geometry(source, chains, owner_counter)

        ring_count = sum(1 for c in chains if c.closed)
        self._logger.log(
            f"[Topology:Extractor] 추출 완료: 링={ring_count}, 라인={len(chains) - ring_count}",
            level="INFO",
        )
        return chains

    def _normalize_object(self, obj: Any, id_func: IdFunc, property_filter: Optional[PropertyFilter]) -> SourceGeometry:
        if hasattr(obj, "__geo_interface__"):
            obj = obj.__geo_interface__
        if not isinstance(obj, Mapping):
            raise InvalidGeometry(f"geometry 객체가 아닙니다: {type(obj).__name__}")

        otype = obj.get("type")
        if otype == "FeatureCollection":
            features = [self._normalize_feature(f, id_func, property_filter) for f in obj.get("features") or []]
            return SourceGeometry(type="GeometryCollection", geometries=features)
        if otype == "Feature":
            return self._normalize_feature(obj, id_func, property_filter)
        return self._normalize_geometry(obj)

    def _normalize_feature(self, feature: Any, id_func: IdFunc, property_filter: Optional[PropertyFilter]) -> SourceGeometry:
        if hasattr(feature, "__geo_interface__"):
            feature = feature.__geo_interface__
        if not isinstance(feature, Mapping) or feature.get("type") != "Feature":
            raise InvalidGeometry("FeatureCollection 에 Feature 가 아닌 항목이 포함되어 있습니다.")

        raw_geometry = feature.get("geometry")
        if raw_geometry is None:
            geom = SourceGeometry(type=None)
        else:
            geom = self._normalize_geometry(raw_geometry)

        geom.id = id_func(dict(feature))
        geom.properties = self._filter_properties(feature.get("properties"), property_filter)
        return geom

    def _filter_properties(self, properties: Optional[Mapping[str, Any]], property_filter: Optional[PropertyFilter]) -> Optional[Dict[str, Any]]:
        if not properties or property_filter is None:
            return None

        kept: Dict[str, Any] = {}
        for key, value in properties.items():
            out_key = property_filter(key)
            if out_key is not None:
                kept[out_key] = value
        return kept or None

    def _normalize_geometry(self, geometry: Any) -> SourceGeometry:
        if hasattr(geometry, "__geo_interface__"):
            geometry = geometry.__geo_interface__
        if not isinstance(geometry, Mapping):
            raise InvalidGeometry(f"geometry 객체가 아닙니다: {type(geometry).__name__}")

        gtype = geometry.get("type")
        if gtype not in GEOMETRY_TYPES:
            raise InvalidGeometry(f"지원하지 않는 geometry 타입입니다: {gtype}")

        if gtype == "GeometryCollection":
            members = [self._normalize_geometry(g) for g in geometry.get("geometries") or []]
            return SourceGeometry(type=gtype, geometries=members)

        coords = geometry.get("coordinates")
        if coords is None:
            raise InvalidGeometry(f"{gtype} 에 coordinates 가 없습니다.")

        try:
            if gtype == "Point":
                normalized = self._position(coords)
            elif gtype == "MultiPoint":
                normalized = [self._position(p) for p in coords]
            elif gtype == "LineString":
                normalized = self._line(coords)
            elif gtype == "MultiLineString":
                normalized = [self._line(line) for line in coords]
            elif gtype == "Polygon":
                normalized = [self._ring(ring) for ring in coords]
            else:
                normalized = [[self._ring(ring) for ring in polygon] for polygon in coords]
        except (TypeError, IndexError, ValueError) as e:
            raise InvalidGeometry(f"{gtype} 좌표 구조가 올바르지 않습니다: {e}") from e

        return SourceGeometry(type=gtype, coordinates=normalized)

    def _position(self, position: Any) -> Point:
        # 3번째 이후 차원(z, m)은 사용하지 않습니다.
        return (float(position[0]), float(position[1]))

    def _line(self, line: Any) -> List[Point]:
        points = [self._position(p) for p in line]
        if len(points) < 2:
            raise InvalidGeometry(f"라인은 최소 2개의 좌표가 필요합니다: {len(points)}개")
        return points

    def _ring(self, ring: Any) -> List[Point]:
        points = [self._position(p) for p in ring]
        if points and points[0] != points[-1]:
            points.append(points[0])
        if len(points) < 4:
            raise InvalidGeometry(f"링을 닫을 수 없습니다 (좌표 {len(points)}개).")
        return points

    def _extract_geometry(self, geom: SourceGeometry, chains: List[Chain], owner_counter: List[int]) -> None:
        if geom.type == "GeometryCollection":
            for member in geom.geometries or []:
                self._extract_geometry(member, chains, owner_counter)
            return

        owner = owner_counter[0]
        owner_counter[0] += 1

        def add(points: List[Point], closed: bool, position: Tuple[int, ...]) -> int:
            chains.append(Chain(points=points, closed=closed, owner=owner, position=position))
            return len(chains) - 1

        if geom.type == "LineString":
            geom.chains = add(geom.coordinates, False, (0,))
        elif geom.type == "MultiLineString":
            geom.chains = [add(line, False, (i,)) for i, line in enumerate(geom.coordinates)]
        elif geom.type == "Polygon":
            geom.chains = [add(ring, True, (i,)) for i, ring in enumerate(geom.coordinates)]
        elif geom.type == "MultiPolygon":
            geom.chains = [
                [add(ring, True, (p, r)) for r, ring in enumerate(polygon)]
                for p, polygon in enumerate(geom.coordinates)
            ]


def iter_positions(geom: SourceGeometry) -> Iterator[Point]:
    """SourceGeometry 트리에 포함된 모든 좌표를 순회합니다."""
    if geom.type == "GeometryCollection":
        for member in geom.geometries or []:
            yield from iter_positions(member)
    elif geom.type == "Point":
        yield geom.coordinates
    elif geom.type in ("MultiPoint", "LineString"):
        yield from geom.coordinates
    elif geom.type in ("MultiLineString", "Polygon"):
        for part in geom.coordinates:
            yield from part
    elif geom.type == "MultiPolygon":
        for polygon in geom.coordinates:
            for ring in polygon:
                yield from ring
