"""
Service/topo_modules/topology/quantizer.py

부동 소수점 좌표를 유한한 정수 격자로 사상하여 이후 단계의 동일성 비교를 정확하게 만드는 양자화 모듈입니다.
"""
from __future__ import annotations

from typing import Callable, List, Mapping, Optional, Tuple

from Common.log import Log

from .extractor import SourceGeometry, iter_positions
from .model import BBox, Point, Transform


class Quantizer:
    """
    전체 입력의 bbox 와 해상도 Q 로 축별 scale = extent / (Q - 1) 을 계산합니다.
    Q 가 0 이면 양자화를 끄고 항등 변환을 사용합니다.
    가까운 점들이 같은 격자 칸으로 합쳐지는 손실은 의도된 동작입니다.
    """

    def __init__(self, logger: Log):
        self._logger = logger

    def bounds(self, sources: Mapping[str, SourceGeometry]) -> Optional[BBox]:
        x0 = y0 = float("inf")
        x1 = y1 = float("-inf")
        for source in sources.values():
            for x, y in iter_positions(source):
                if x < x0:
                    x0 = x
                if x > x1:
                    x1 = x
                if y < y0:
                    y0 = y
                if y > y1:
                    y1 = y

        if x0 > x1:
            return None
        return (x0, y0, x1, y1)

    def build_transform(self, bbox: Optional[BBox], quantization: int) -> Transform:
        if not quantization or bbox is None:
            return Transform()

        x0, y0, x1, y1 = bbox
        kx = (quantization - 1) / (x1 - x0) if x1 - x0 else 1.0
        ky = (quantization - 1) / (y1 - y0) if y1 - y0 else 1.0
        return Transform(scale=(1.0 / kx, 1.0 / ky), translate=(x0, y0))

    def execute(self, sources: Mapping[str, SourceGeometry], quantization: int) -> Tuple[Transform, Optional[BBox]]:
        """좌표를 격자로 사상하여 sources 의 작업용 좌표를 갱신하고 (transform, bbox) 를 반환합니다."""
        bbox = self.bounds(sources)
        transform = self.build_transform(bbox, quantization)

        if quantization and bbox is not None:
            x0, y0 = transform.translate
            kx, ky = 1.0 / transform.scale[0], 1.0 / transform.scale[1]

            def snap(p: Point) -> Point:
                return (int(round((p[0] - x0) * kx)), int(round((p[1] - y0) * ky)))
        else:
            def snap(p: Point) -> Point:
                return (p[0], p[1])

        removed = [0]
        for source in sources.values():
            self._quantize_geometry(source, snap, removed)

        if quantization:
            self._logger.log(
                f"[Topology:Quantizer] 양자화 완료 (Q={quantization}, scale={transform.scale}, 중복 제거={removed[0]})",
                level="INFO",
            )
        else:
            self._logger.log("[Topology:Quantizer] 양자화 비활성화: 항등 변환을 사용합니다.", level="INFO")
        return transform, bbox

    def _quantize_geometry(self, geom: SourceGeometry, snap: Callable[[Point], Point], removed: List[int]) -> None:
        gtype = geom.type
        if gtype == "GeometryCollection":
            for member in geom.geometries or []:
                self._quantize_geometry(member, snap, removed)
        elif gtype == "Point":
            geom.coordinates = snap(geom.coordinates)
        elif gtype == "MultiPoint":
            geom.coordinates = [snap(p) for p in geom.coordinates]
        elif gtype == "LineString":
            geom.coordinates = self._snap_chain(geom.coordinates, snap, removed)
        elif gtype == "MultiLineString":
            geom.coordinates = [self._snap_chain(line, snap, removed) for line in geom.coordinates]
        elif gtype == "Polygon":
            geom.coordinates = [self._snap_chain(ring, snap, removed) for ring in geom.coordinates]
        elif gtype == "MultiPolygon":
            geom.coordinates = [
                [self._snap_chain(ring, snap, removed) for ring in polygon] for polygon in geom.coordinates
            ]

    def _snap_chain(self, points: List[Point], snap: Callable[[Point], Point], removed: List[int]) -> List[Point]:
        """격자 사상 후 연속 중복 점을 제거합니다. 한 칸으로 붕괴된 경우 동일한 두 점으로 채웁니다."""
        snapped: List[Point] = []
        for p in points:
            q = snap(p)
            if snapped and snapped[-1] == q:
                removed[0] += 1
                continue
            snapped.append(q)

        if len(snapped) < 2:
            snapped.append(snapped[0])
        return snapped
