"""
Service/topo_modules/topology/delta.py

정규 아크의 절대 좌표를 (첫 점 + 순방향 차분) 형태로 변환하고 복원하는 델타 인코딩 모듈입니다.
"""
from __future__ import annotations

from typing import List, Sequence

from .model import Point


class DeltaEncoder:
    """
    아크 직렬화 시점에만 사용됩니다. 생성 단계의 불변식은 항상 절대 좌표 위에서 검사됩니다.
    """

    def encode(self, arc: Sequence[Point]) -> List[List[float]]:
        if not arc:
            return []

        x0, y0 = arc[0]
        encoded = [[x0, y0]]
        for x, y in arc[1:]:
            dx, dy = x - x0, y - y0
            # 길이 0 인 차분은 기록하지 않습니다.
            if dx or dy:
                encoded.append([dx, dy])
                x0, y0 = x, y

        if len(encoded) < 2:
            encoded.append([0, 0])
        return encoded

    def decode(self, encoded: Sequence[Sequence[float]]) -> List[Point]:
        """누적 합으로 절대 좌표를 복원합니다."""
        points: List[Point] = []
        x = y = 0
        for dx, dy in (p[:2] for p in encoded):
            x += dx
            y += dy
            points.append((x, y))
        return points
