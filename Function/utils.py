"""
Function/utils.py

프로그램 실행 환경에 따른 파일 및 디렉토리 경로 연산을 처리하는 유틸리티 모듈입니다.
"""
from pathlib import Path
import sys


def get_runtime_base_path() -> Path:
    """
    실행 파일 또는 메인 스크립트가 위치한 물리적 경로를 반환합니다.
    기본 출력 폴더(Result)는 이 경로 아래에 생성됩니다.

    Returns:
        Path: 프로그램 실행 파일이 위치한 디렉토리 경로
    """
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    if sys.argv and sys.argv[0]:
        return Path(sys.argv[0]).resolve().parent
    return Path.cwd()
