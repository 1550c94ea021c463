"""
Service/topology_service.py

입력 로드부터 Topology 생성, 단순화, 필터링, 저장까지 전체 공정을 제어하는 서비스 모듈입니다.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from Common.log import Log
from Function.utils import get_runtime_base_path
from Function.decorators import log_execution_time, safe_run
from Service.config import FilterConfig, PipelineConfig, SimplifyConfig
from Service.schemas import FileLoadRequest, FileSaveRequest
from Service.topo_modules import (
    GISIO,
    ResultValidator,
    Topology,
    TopologyBuilder,
    TopologyDiagnostics,
    TopologyFilter,
    TopologySimplifier,
)
from Service.topo_modules.topology.extractor import IdFunc, PropertyFilter


class TopologyService:
    """
    Built -> (Simplified) -> (Filtered) -> Serialized 순서를 강제하는 메인 서비스 클래스입니다.
    """

    def __init__(
        self,
        logger: Log,
        gis_io: GISIO,
        builder: TopologyBuilder,
        simplifier: TopologySimplifier,
        topology_filter: TopologyFilter,
        validator: ResultValidator,
        diagnostics: TopologyDiagnostics,
        config: Optional[PipelineConfig] = None,
        simplify_config: Optional[SimplifyConfig] = None,
        filter_config: Optional[FilterConfig] = None,
    ):
        self._logger = logger
        self._gis_io = gis_io
        self._builder = builder
        self._simplifier = simplifier
        self._filter = topology_filter
        self._validator = validator
        self._diagnostics = diagnostics
        self._config = config or PipelineConfig()
        self._simplify_config = simplify_config or SimplifyConfig()
        self._filter_config = filter_config or FilterConfig()
        self._last_stage_meta: List[Dict[str, Any]] = []

    @safe_run
    @log_execution_time
    def run_pipeline(self, input_paths: Sequence[str], output_path: Optional[str] = None) -> str:
        """
        모든 입력 소스를 로드한 뒤 하나의 Topology 로 변환하여 저장합니다.
        소스 하나라도 로드에 실패하면 전체 작업을 중단하며 부분 결과는 저장하지 않습니다.
        """
        if not input_paths:
            raise ValueError("입력 파일이 지정되지 않았습니다.")

        requests = [FileLoadRequest(file_path=Path(p)) for p in input_paths]
        names = [r.object_name for r in requests]
        duplicated = sorted({n for n in names if names.count(n) > 1})
        if duplicated:
            raise ValueError(f"객체 이름이 중복됩니다: {duplicated}")

        objects = {request.object_name: self._gis_io.load(request) for request in requests}

        topology = self.convert(objects)

        if output_path:
            target = Path(output_path)
        else:
            target = self._default_output(f"{Path(input_paths[0]).stem}_topology.json")

        final_path = self._gis_io.save(topology, FileSaveRequest(output_path=target))
        self._log_stage("serialized", {"path": final_path.name})
        return str(final_path)

    @safe_run
    @log_execution_time
    def convert(self, objects: Mapping[str, Any]) -> Topology:
        """메모리상의 geometry 컬렉션을 생성, 단순화, 필터링 순서로 처리한 Topology 로 변환합니다."""
        self._last_stage_meta = []

        topology = self._builder.execute(
            objects,
            id_func=self._build_id_func(),
            property_filter=self._build_property_filter(),
        )
        self._log_stage("built", {"objects": len(topology.objects), "arcs": len(topology.arcs)})

        return self._refine(topology)

    @safe_run
    @log_execution_time
    def refine_file(self, input_path: str, output_path: Optional[str] = None) -> str:
        """
        이미 생성된 TopoJSON 파일에 단순화와 필터만 다시 적용하여 저장합니다.
        좌표계는 설정값이 없으면 파일의 bbox 범위로 판정합니다.
        """
        self._last_stage_meta = []
        request = FileLoadRequest(file_path=Path(input_path))

        topology = self._gis_io.load_topology(request)
        self._log_stage("loaded", {"objects": len(topology.objects), "arcs": len(topology.arcs)})

        topology = self._refine(topology)

        target = Path(output_path) if output_path else self._default_output(f"{request.file_path.stem}_refined.json")
        final_path = self._gis_io.save(topology, FileSaveRequest(output_path=target))
        self._log_stage("serialized", {"path": final_path.name})
        return str(final_path)

    def _refine(self, topology: Topology) -> Topology:
        """단순화(설정 시) -> 필터 -> 검증 순서로 Topology 를 처리합니다."""
        if self._simplify_config.is_enabled:
            self._simplifier.execute(topology, self._simplify_config)
            self._log_stage("simplified", {"points": sum(len(arc) for arc in topology.arcs)})

        if self._config.apply_filter:
            self._filter.execute(topology, self._filter_config)
            self._log_stage("filtered", {"objects": len(topology.objects), "arcs": len(topology.arcs)})

        self._validator.execute(topology)
        try:
            self._diagnostics.report(topology)
        except Exception as e:
            self._logger.log(f"[Topology:Diag] 진단 로그 출력 실패: {e}", level="WARNING")

        return topology

    def _default_output(self, file_name: str) -> Path:
        output_dir = get_runtime_base_path() / self._config.output_dir
        output_dir.mkdir(parents=True, exist_ok=True)
        return output_dir / file_name

    def get_last_stage_meta(self) -> List[Dict[str, Any]]:
        return [dict(item) for item in self._last_stage_meta]

    def _build_id_func(self) -> Optional[IdFunc]:
        key = self._config.id_property
        if not key:
            return None

        def id_func(feature: Dict[str, Any]) -> Any:
            return (feature.get("properties") or {}).get(key, feature.get("id"))

        return id_func

    def _build_property_filter(self) -> Optional[PropertyFilter]:
        allowed = self._config.properties
        if allowed is None:
            return lambda key: key
        if not allowed:
            return None

        allowed_set = set(allowed)
        return lambda key: key if key in allowed_set else None

    def _log_stage(self, stage: str, meta: Dict[str, object]) -> None:
        self._last_stage_meta.append({"stage": stage, "meta": dict(meta)})
        items = ", ".join([f"{k}={v}" for k, v in meta.items()])
        self._logger.log(f"[Topology:Stage:{stage}] {items}", level="INFO")
