"""
Service/topo_modules/topology/processor.py

양자화, 추출, 분기점 탐지, 아크 분할, 병합, 조립 단계를 순서대로 실행하여 Topology 를 생성하는 오케스트레이터 모듈입니다.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from Common.log import Log
from Function.decorators import log_execution_time, safe_run
from Service.config import TopologyConfig

from .assembler import TopologyAssembler
from .cutter import ArcCutter
from .dedup import ArcDeduplicator
from .extractor import GeometryExtractor, IdFunc, PropertyFilter
from .junctions import JunctionDetector
from .model import Topology, detect_coordinate_system
from .quantizer import Quantizer


class TopologyBuilder:
    """
    변환 1회당 한 번 실행되는 상태 없는(stateless) 생성 엔진입니다.
    id 추출 함수와 속성 필터는 전역 상태가 아닌 execute() 인자로 전달받습니다.
    """

    def __init__(
        self,
        logger: Log,
        config: TopologyConfig,
        extractor: GeometryExtractor,
        quantizer: Quantizer,
        junction_detector: JunctionDetector,
        cutter: ArcCutter,
        deduplicator: ArcDeduplicator,
        assembler: TopologyAssembler,
    ):
        self._logger = logger
        self._config = config
        self._extractor = extractor
        self._quantizer = quantizer
        self._junctions = junction_detector
        self._cutter = cutter
        self._dedup = deduplicator
        self._assembler = assembler

    @classmethod
    def create(cls, logger: Log, config: Optional[TopologyConfig] = None) -> "TopologyBuilder":
        """기본 단계 구성으로 빌더를 생성합니다."""
        return cls(
            logger=logger,
            config=config or TopologyConfig(),
            extractor=GeometryExtractor(logger),
            quantizer=Quantizer(logger),
            junction_detector=JunctionDetector(logger),
            cutter=ArcCutter(logger),
            deduplicator=ArcDeduplicator(logger),
            assembler=TopologyAssembler(logger),
        )

    @safe_run
    @log_execution_time
    def execute(
        self,
        objects: Mapping[str, Any],
        id_func: Optional[IdFunc] = None,
        property_filter: Optional[PropertyFilter] = None,
    ) -> Topology:
        """
        이름 -> geometry 컬렉션 매핑을 하나의 Topology 로 변환합니다.
        입력 geometry 하나라도 잘못되면 InvalidGeometry 로 전체 변환을 중단합니다.
        """
        self._logger.log(f"=== [Topology Build] 시작 (객체 {len(objects)}개) ===", level="INFO")

        sources = self._extractor.normalize(objects, id_func=id_func, property_filter=property_filter)

        transform, bbox = self._quantizer.execute(sources, self._config.quantization)
        coordinate_system = self._config.coordinate_system or detect_coordinate_system(bbox)

        chains = self._extractor.extract(sources)
        junctions = self._junctions.execute(chains)
        slots = self._cutter.execute(chains, junctions)
        arcs, refs_by_chain = self._dedup.execute(slots)

        topology = self._assembler.execute(sources, arcs, refs_by_chain, transform, bbox, coordinate_system)

        self._logger.log(
            f"=== [Topology Build] 완료 (아크 {len(topology.arcs)}개, 좌표계 {coordinate_system}) ===",
            level="INFO",
        )
        return topology
