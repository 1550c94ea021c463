"""
Service/container.py

설정을 로드하고 토폴로지 엔진의 모든 객체를 생성하여 의존성을 주입하는 조립 모듈입니다.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from Common.log import Log

from Service.config import FilterConfig, PipelineConfig, SimplifyConfig, TopologyConfig
from Service.topo_modules import GISIO, ResultValidator, TopologyDiagnostics
from Service.topo_modules.topology import (
    TopologyBuilder,
    GeometryExtractor,
    Quantizer,
    JunctionDetector,
    ArcCutter,
    ArcDeduplicator,
    TopologyAssembler,
)
from Service.topo_modules.simplify import TopologySimplifier
from Service.topo_modules.filter import (
    TopologyFilter,
    WindingNormalizer,
    AreaFilter,
    ArcPruner,
)
from Service.topology_service import TopologyService


@dataclass(frozen=True)
class BuiltApp:
    """조립이 완료된 서비스 객체 묶음입니다."""
    topology_service: TopologyService
    gis_io: GISIO


def build_app(
    logger: Log,
    topology_config: Optional[TopologyConfig] = None,
    simplify_config: Optional[SimplifyConfig] = None,
    filter_config: Optional[FilterConfig] = None,
    pipeline_config: Optional[PipelineConfig] = None,
) -> BuiltApp:
    """
    설정 로드 및 모든 내부 모듈의 의존성을 주입하여 BuiltApp 객체를 생성합니다.
    단순화 임계값 충돌(ConflictingOptions)은 이 단계, 즉 생성 시작 전에 드러납니다.
    """
    topology_config = topology_config or TopologyConfig()
    simplify_config = simplify_config or SimplifyConfig()
    filter_config = filter_config or FilterConfig()
    pipeline_config = pipeline_config or PipelineConfig()

    gis_io = GISIO(logger)

    builder = TopologyBuilder(
        logger=logger,
        config=topology_config,
        extractor=GeometryExtractor(logger),
        quantizer=Quantizer(logger),
        junction_detector=JunctionDetector(logger),
        cutter=ArcCutter(logger),
        deduplicator=ArcDeduplicator(logger),
        assembler=TopologyAssembler(logger),
    )

    simplifier = TopologySimplifier(logger, simplify_config)

    topology_filter = TopologyFilter(
        logger=logger,
        config=filter_config,
        winding=WindingNormalizer(logger),
        area_filter=AreaFilter(logger),
        pruner=ArcPruner(logger),
    )

    topology_service = TopologyService(
        logger=logger,
        gis_io=gis_io,
        builder=builder,
        simplifier=simplifier,
        topology_filter=topology_filter,
        validator=ResultValidator(logger),
        diagnostics=TopologyDiagnostics(logger),
        config=pipeline_config,
        simplify_config=simplify_config,
        filter_config=filter_config,
    )

    return BuiltApp(topology_service=topology_service, gis_io=gis_io)
