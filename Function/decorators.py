"""
Function/decorators.py

파이프라인 단계의 실행 시간 측정 및 예외 기록을 위한 데코레이터 모듈입니다.
"""
from __future__ import annotations

import functools
import logging
import time
import traceback
from typing import Any, Callable, ParamSpec, TypeVar, Optional

P = ParamSpec("P")
R = TypeVar("R")

_STD_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def _resolve_custom_logger(instance: Any) -> Optional[Any]:
    """
    인스턴스(self)가 `_logger` 또는 `logger` 속성으로 Log 호환 객체를 보유하면 반환합니다.

    Args:
        instance (Any): 데코레이트된 메서드의 첫 번째 인자

    Returns:
        Optional[Any]: 로거 인스턴스 또는 None
    """
    if instance is None:
        return None

    for attr in ("_logger", "logger"):
        candidate = getattr(instance, attr, None)
        if candidate is not None and hasattr(candidate, "log") and not isinstance(candidate, logging.Logger):
            return candidate

    return None


def _emit(instance: Any, msg: str, level: str) -> None:
    custom_logger = _resolve_custom_logger(instance)
    if custom_logger:
        custom_logger.log(msg, level=level)
    else:
        logging.log(_STD_LEVELS[level], msg)


def log_execution_time(func: Callable[P, R]) -> Callable[P, R]:
    """
    단계의 시작과 종료를 기록하고 실행 시간을 측정하는 데코레이터입니다.

    Returns:
        Callable: 데코레이트된 함수
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        instance = args[0] if args else None
        func_name = func.__qualname__

        _emit(instance, f"▶ [시작] {func_name}", "DEBUG")
        start_time = time.perf_counter()

        result = func(*args, **kwargs)

        elapsed = time.perf_counter() - start_time
        _emit(instance, f"◀ [완료] {func_name} (소요 시간: {elapsed:.4f}초)", "INFO")
        return result

    return wrapper


def safe_run(func: Callable[P, R]) -> Callable[P, R]:
    """
    실행 중 발생한 예외의 Traceback 을 로그에 남기고 예외를 그대로 재전파합니다.
    부분 결과를 반환하지 않으므로 호출자는 실패를 배치 전체의 실패로 처리합니다.

    Raises:
        Exception: 원본 함수에서 발생한 예외
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return func(*args, **kwargs)
        except Exception as e:
            instance = args[0] if args else None
            log_msg = (
                f"'{func.__qualname__}' 실행 중 오류 발생: {type(e).__name__}: {e}\n"
                f"[Traceback]\n{traceback.format_exc()}"
            )
            _emit(instance, log_msg, "ERROR")
            raise

    return wrapper
