"""
Service/topo_modules/gis_io.py

입력 geometry 파일(SHP, GeoJSON, GPKG)의 로드와 TopoJSON 결과 저장을 담당하는 모듈입니다.
"""
from __future__ import annotations

import datetime
import json
from pathlib import Path
from typing import Any, Optional

import geopandas as gpd

from Common.log import Log
from Function.decorators import log_execution_time, safe_run
from Service.schemas import FileLoadRequest, FileSaveRequest
from Service.topo_modules.topology.model import Topology


def _json_default(value: Any) -> Any:
    """
    GeoDataFrame 속성에서 오는 numpy 스칼라와 날짜/시각 값만 변환합니다.
    그 외의 값은 TypeError 로 저장을 중단합니다.
    """
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    if hasattr(value, "dtype") and hasattr(value, "item"):
        item = value.item()
        return item.isoformat() if isinstance(item, (datetime.date, datetime.time)) else item
    raise TypeError(f"JSON 으로 직렬화할 수 없는 속성 값입니다: {type(value).__name__}")


class GISIO:
    """
    입력 파일을 GeoDataFrame 으로 로드하고, Topology 를 TopoJSON 파일로 저장합니다.
    """

    def __init__(self, logger: Log):
        self._logger = logger

    @safe_run
    @log_execution_time
    def load(self, request: FileLoadRequest) -> gpd.GeoDataFrame:
        """
        geometry 파일을 로드하고 데이터 존재 여부를 검증합니다.

        Args:
            request (FileLoadRequest): 파일 경로를 포함한 로드 요청 객체

        Returns:
            gpd.GeoDataFrame: 로드된 지리 정보 데이터
        """
        file_path = request.file_path.expanduser().resolve()

        gdf = gpd.read_file(file_path)

        if gdf.empty:
            raise ValueError(f"로드된 데이터가 비어있습니다: {file_path.name}")

        crs_name = getattr(gdf.crs, "name", None) or "Unknown"
        self._logger.log(
            f"데이터 로드 상세 - 객체: {request.object_name}, 피처 수: {len(gdf)}, CRS: {crs_name}",
            level="INFO",
        )
        return gdf

    @safe_run
    @log_execution_time
    def load_topology(self, request: FileLoadRequest, coordinate_system: Optional[str] = None) -> Topology:
        """
        이미 생성된 TopoJSON 파일을 Topology 로 복원합니다.
        coordinate_system 이 없으면 bbox 범위로 좌표계를 판정합니다.
        """
        file_path = request.file_path.expanduser().resolve()
        data = json.loads(file_path.read_text(encoding="utf-8"))
        topology = Topology.from_dict(data, coordinate_system=coordinate_system)
        self._logger.log(
            f"TopoJSON 로드 완료: 객체 {len(topology.objects)}개, 아크 {len(topology.arcs)}개, 좌표계 {topology.coordinate_system}",
            level="INFO",
        )
        return topology

    @safe_run
    @log_execution_time
    def save(self, topology: Topology, request: FileSaveRequest) -> Path:
        """
        Topology 를 TopoJSON 으로 직렬화하여 지정된 경로에 저장합니다.

        Args:
            topology (Topology): 저장할 토폴로지
            request (FileSaveRequest): 저장 경로를 포함한 요청 객체

        Returns:
            Path: 저장된 파일의 경로
        """
        output_path = request.output_path.expanduser().resolve()

        if not topology.objects:
            self._logger.log("저장할 객체가 비어있습니다.", level="WARNING")

        output_path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(topology.to_dict(), ensure_ascii=False, separators=(",", ":"), default=_json_default)
        output_path.write_text(payload, encoding="utf-8")

        self._logger.log(f"저장 완료: {output_path}", level="INFO")
        return output_path
