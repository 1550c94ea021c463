"""
Service/topo_modules/filter/processor.py

감김 방향 정규화, 최소 면적 제거, 미사용 아크 정리를 설정에 따라 실행하는 필터 오케스트레이터 모듈입니다.
"""
from __future__ import annotations

from typing import Optional

from Common.log import Log
from Function.decorators import log_execution_time, safe_run
from Service.config import FilterConfig
from Service.topo_modules.topology.model import Topology

from .pruners import AreaFilter, ArcPruner
from .winding import WindingNormalizer


class TopologyFilter:
    """
    단순화 이후에 적용해야 합니다. 단순화 전에 실행하면 오래된 geometry 로 면적을 계산하게 됩니다.
    """

    def __init__(
        self,
        logger: Log,
        config: FilterConfig,
        winding: WindingNormalizer,
        area_filter: AreaFilter,
        pruner: ArcPruner,
    ):
        self._logger = logger
        self._config = config
        self._winding = winding
        self._area_filter = area_filter
        self._pruner = pruner

    @classmethod
    def create(cls, logger: Log, config: Optional[FilterConfig] = None) -> "TopologyFilter":
        return cls(
            logger=logger,
            config=config or FilterConfig(),
            winding=WindingNormalizer(logger),
            area_filter=AreaFilter(logger),
            pruner=ArcPruner(logger),
        )

    @safe_run
    @log_execution_time
    def execute(self, topology: Topology, config: Optional[FilterConfig] = None) -> Topology:
        config = config or self._config

        self._area_filter.execute(
            topology,
            minimum_area=config.minimum_area,
            coordinate_system=config.coordinate_system,
            preserve_attached=config.preserve_attached,
        )

        if config.force_clockwise:
            self._winding.execute(topology)

        if config.prune_arcs:
            self._pruner.execute(topology)

        self._logger.log(
            f"[Topology:Filter] 필터 완료: 객체 {len(topology.objects)}개, 아크 {len(topology.arcs)}개",
            level="INFO",
        )
        return topology
