"""
Service/schemas.py

입출력 파일 경로의 구조를 정의하고 유효성을 검증하는 스키마 모듈입니다.
"""
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

INPUT_SUFFIXES = {".shp", ".geojson", ".json", ".gpkg"}
OUTPUT_SUFFIXES = {".json", ".topojson"}


class FileLoadRequest(BaseModel):
    """
    입력 소스 로드 요청을 위한 데이터 모델입니다.
    """
    file_path: Path = Field(..., description="읽어올 geometry 파일의 경로")
    name: Optional[str] = Field(default=None, description="Topology 객체 이름. 미지정 시 파일명 사용")

    @field_validator("file_path")
    @classmethod
    def validate_extension(cls, v: Path) -> Path:
        if v.suffix.lower() not in INPUT_SUFFIXES:
            raise ValueError(f"지원하지 않는 파일 형식입니다. ({', '.join(sorted(INPUT_SUFFIXES))} 필요): {v.suffix}")
        return v

    @field_validator("file_path")
    @classmethod
    def validate_existence(cls, v: Path) -> Path:
        resolved_path = v.resolve()
        if not resolved_path.exists() or not resolved_path.is_file():
            raise ValueError(f"파일을 찾을 수 없습니다: {resolved_path}")
        return resolved_path

    @property
    def object_name(self) -> str:
        return self.name or self.file_path.stem


class FileSaveRequest(BaseModel):
    """
    Topology 저장 요청을 위한 데이터 모델입니다.
    """
    output_path: Path = Field(..., description="결과를 저장할 파일 경로")

    @field_validator("output_path")
    @classmethod
    def validate_extension(cls, v: Path) -> Path:
        if v.suffix.lower() not in OUTPUT_SUFFIXES:
            raise ValueError(f"저장 파일 형식은 .json 또는 .topojson 이어야 합니다: {v.suffix}")
        return v.resolve()
