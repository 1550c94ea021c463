"""
Service/topo_modules/simplify/processor.py

분기점을 보존하면서 아크 내부 점을 Visvalingam-Whyatt 방식으로 제거하는 위상 보존 단순화 모듈입니다.
"""
from __future__ import annotations

import heapq
import math
from typing import List, Optional, Tuple

from Common.log import Log
from Function.decorators import log_execution_time, safe_run
from Service.config import SimplifyConfig
from Service.topo_modules.topology.model import Point, Topology

from .areas import CoordinateSystem

# (유효 면적, 아크 인덱스, 점 인덱스, 무효화 토큰)
_HeapEntry = Tuple[float, int, int, int]


class _ArcState:
    """아크 하나의 이중 연결 리스트 상태입니다. 끝점(분기점)은 제거 대상이 아닙니다."""

    __slots__ = ("points", "coords", "prev", "next", "removed", "token")

    def __init__(self, points: List[Point], coords: List[Point]):
        n = len(points)
        self.points = points
        self.coords = coords
        self.prev = list(range(-1, n - 1))
        self.next = list(range(1, n + 1))
        self.removed = [False] * n
        self.token = [0] * n

    def is_interior(self, i: int) -> bool:
        return 0 < i < len(self.points) - 1


class TopologySimplifier:
    """
    모든 아크의 모든 내부 점을 하나의 전역 최소 힙에서 유효 면적 기준으로 관리합니다.
    최소값을 꺼내 임계값을 넘으면 종료하고, 아니면 제거한 뒤 양 이웃의 면적을 다시 계산해 넣습니다.
    오래된 항목은 토큰 비교로 건너뜁니다(지연 삭제).
    면적이 같으면 (아크 인덱스, 원래 점 인덱스) 오름차순으로 먼저 제거합니다.
    """

    def __init__(self, logger: Log, config: Optional[SimplifyConfig] = None):
        self._logger = logger
        self._config = config or SimplifyConfig()

    @safe_run
    @log_execution_time
    def execute(self, topology: Topology, config: Optional[SimplifyConfig] = None) -> Topology:
        """Topology 의 아크를 제자리에서 단순화하고 같은 객체를 반환합니다."""
        config = config or self._config
        if not config.is_enabled:
            self._logger.log("[Topology:Simplifier] 임계값이 지정되지 않아 단순화를 건너뜁니다.", level="WARNING")
            return topology

        system = CoordinateSystem(config.coordinate_system or topology.coordinate_system)
        states = [
            _ArcState(arc, [topology.transform.apply(p) for p in arc])
            for arc in topology.arcs
        ]

        heap: List[_HeapEntry] = []
        interior_count = 0
        for a, state in enumerate(states):
            for i in range(1, len(state.points) - 1):
                heap.append((self._area(system, state, i), a, i, 0))
                interior_count += 1
        heapq.heapify(heap)

        if config.retain_proportion is not None:
            threshold = math.inf
            budget = interior_count - int(math.ceil(interior_count * config.retain_proportion))
        else:
            threshold = float(config.minimum_area)
            budget = interior_count

        removed = 0
        while heap and removed < budget:
            area, a, i, token = heapq.heappop(heap)
            state = states[a]
            if state.removed[i] or token != state.token[i]:
                continue
            if area > threshold:
                break

            state.removed[i] = True
            prev_i, next_i = state.prev[i], state.next[i]
            state.next[prev_i] = next_i
            state.prev[next_i] = prev_i
            removed += 1

            for j in (prev_i, next_i):
                if state.is_interior(j):
                    state.token[j] += 1
                    heapq.heappush(heap, (self._area(system, state, j), a, j, state.token[j]))

        before = sum(len(arc) for arc in topology.arcs)
        topology.arcs = [
            [p for p, gone in zip(state.points, state.removed) if not gone]
            for state in states
        ]
        after = sum(len(arc) for arc in topology.arcs)

        mode = (
            f"retain_proportion={config.retain_proportion}"
            if config.retain_proportion is not None
            else f"minimum_area={config.minimum_area}"
        )
        self._logger.log(
            f"[Topology:Simplifier] 단순화 완료 ({mode}, 좌표계={system.name}): 점 {before} -> {after} (내부 점 {removed}개 제거)",
            level="INFO",
        )
        return topology

    @staticmethod
    def _area(system: CoordinateSystem, state: _ArcState, i: int) -> float:
        return system.triangle_area(state.coords[state.prev[i]], state.coords[i], state.coords[state.next[i]])
