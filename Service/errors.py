"""
Service/errors.py

토폴로지 생성 및 후처리 과정에서 발생하는 예외 타입을 정의하는 모듈입니다.
"""
from __future__ import annotations

from typing import Any, Optional, Tuple


class TopologyError(Exception):
    """토폴로지 엔진에서 발생하는 모든 예외의 기본 클래스입니다."""


class InvalidGeometry(TopologyError):
    """
    지원하지 않는 geometry 타입, 잘못된 좌표 구조, 닫을 수 없는 링,
    2점 미만으로 붕괴된 아크(Degenerate Arc) 등을 나타냅니다.
    """

    def __init__(self, message: str, owner: Any = None, position: Optional[Tuple[int, ...]] = None):
        self.owner = owner
        self.position = position
        if owner is not None or position is not None:
            message = f"{message} (owner={owner}, position={position})"
        super().__init__(message)


class ConflictingOptions(TopologyError):
    """최소 면적과 유지 비율 단순화 임계값이 동시에 지정된 경우 발생합니다."""
