"""
Service/topo_modules/diagnostics.py

생성된 Topology 의 아크 공유 현황과 점 개수 분포 등 통계 수치를 분석하여 로그로 출력하는 진단 모듈입니다.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Dict, Optional

import pandas as pd

from Common.log import Log
from Service.topo_modules.topology.model import TopoGeometry, Topology


@dataclass(frozen=True)
class TopologyDiagnosticsPolicy:
    """진단 시 분포 계산 구간과 리포트 제한 설정입니다."""
    percentiles: tuple = (0.05, 0.5, 0.95)
    top_n_objects: int = 20


class TopologyDiagnostics:
    """
    아크 수, 공유 아크 수, 아크별 점 개수 분포, 객체별 geometry 타입 구성을 보고합니다.
    """

    def __init__(self, logger: Log, policy: Optional[TopologyDiagnosticsPolicy] = None):
        self._logger = logger
        self._policy = policy or TopologyDiagnosticsPolicy()

    def report(self, topology: Topology) -> Dict[str, float]:
        if not topology.arcs:
            self._logger.log("[Topology:Diag] 분석할 아크가 없습니다.", level="WARNING")
            return {"arcs": 0, "shared_arcs": 0, "points": 0}

        usage: Counter = Counter()
        for geom in topology.objects.values():
            for refs in geom.iter_rings():
                usage.update(ref.index for ref in refs)
        shared = sum(1 for n in usage.values() if n > 1)

        counts = pd.Series([len(arc) for arc in topology.arcs], dtype="int64")
        desc = counts.describe(percentiles=list(self._policy.percentiles)).to_dict()

        self._logger.log(
            f"[Topology:Diag][Arcs] 아크={len(topology.arcs)} 공유={shared} 점={int(counts.sum())}",
            level="INFO",
        )
        self._logger.log(
            "[Topology:Diag][ArcPoints] "
            + " ".join([f"{k}={float(v):.1f}" for k, v in desc.items() if k != "count"]),
            level="INFO",
        )
        self._log_objects(topology)

        return {"arcs": len(topology.arcs), "shared_arcs": shared, "points": int(counts.sum())}

    def _log_objects(self, topology: Topology) -> None:
        """객체별 geometry 타입 구성을 기록합니다."""
        for name in list(topology.objects)[: self._policy.top_n_objects]:
            types: Counter = Counter()
            self._count_types(topology.objects[name], types)
            items = ", ".join(f"{k}={v}" for k, v in sorted(types.items()))
            self._logger.log(f"[Topology:Diag][Object:{name}] {items}", level="DEBUG")

    def _count_types(self, geom: TopoGeometry, types: Counter) -> None:
        if geom.type == "GeometryCollection":
            for child in geom.geometries or []:
                self._count_types(child, types)
        else:
            types[geom.type or "null"] += 1
