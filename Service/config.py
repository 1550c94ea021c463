"""
Service/config.py

토폴로지 생성, 단순화, 필터링 파이프라인의 동작을 제어하는 설정 모듈입니다.
"""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from Service.errors import ConflictingOptions

CoordinateSystem = Literal["cartesian", "spherical"]


class TopologyConfig(BaseSettings):
    """
    Topology 생성 단계의 핵심 파라미터를 정의하는 설정 클래스입니다.
    """

    quantization: int = Field(
        default=10000,
        ge=0,
        description="축별 최대 구분 가능 좌표 수(Q). 0 이면 양자화 비활성화"
    )

    coordinate_system: Optional[CoordinateSystem] = Field(
        default=None,
        description="좌표계(cartesian/spherical). 미지정 시 bbox 범위로 자동 판정"
    )

    model_config = SettingsConfigDict(
        env_prefix="TOPO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("quantization")
    @classmethod
    def validate_quantization(cls, v: int) -> int:
        if v == 1:
            raise ValueError("양자화 해상도는 0(비활성) 또는 2 이상이어야 합니다.")
        return v


class SimplifyConfig(BaseSettings):
    """
    Visvalingam-Whyatt 단순화 임계값 설정입니다.
    minimum_area 와 retain_proportion 은 동시에 지정할 수 없습니다.
    """

    minimum_area: Optional[float] = Field(
        default=None,
        ge=0.0,
        description="유효 면적이 이 값 이하인 내부 점을 제거"
    )

    retain_proportion: Optional[float] = Field(
        default=None,
        gt=0.0,
        le=1.0,
        description="유지할 내부 점 비율 (0, 1]"
    )

    coordinate_system: Optional[CoordinateSystem] = Field(
        default=None,
        description="면적 계산 좌표계. 미지정 시 Topology 의 좌표계를 사용"
    )

    model_config = SettingsConfigDict(
        env_prefix="TOPO_SIMPLIFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_exclusive_threshold(self) -> "SimplifyConfig":
        if self.minimum_area is not None and self.retain_proportion is not None:
            raise ConflictingOptions("minimum_area 와 retain_proportion 은 동시에 지정할 수 없습니다.")
        return self

    @property
    def is_enabled(self) -> bool:
        return self.minimum_area is not None or self.retain_proportion is not None


class FilterConfig(BaseSettings):
    """
    링 감김 방향 정규화와 최소 면적 제거 설정입니다.
    """

    minimum_area: float = Field(
        default=0.0,
        ge=0.0,
        description="이 면적 미만의 링 제거 (외곽 링 제거 시 폴리곤 전체 제거)"
    )

    force_clockwise: bool = Field(
        default=True,
        description="외곽 링은 시계 방향, 내부(구멍) 링은 반시계 방향으로 정규화"
    )

    preserve_attached: bool = Field(
        default=False,
        description="다른 링과 아크를 공유하는 링은 면적과 무관하게 보존"
    )

    prune_arcs: bool = Field(
        default=True,
        description="필터링 후 참조되지 않는 아크를 제거하고 인덱스를 재배열"
    )

    coordinate_system: Optional[CoordinateSystem] = Field(
        default=None,
        description="면적 계산 좌표계. 미지정 시 Topology 의 좌표계를 사용"
    )

    model_config = SettingsConfigDict(
        env_prefix="TOPO_FILTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class PipelineConfig(BaseSettings):
    """
    입력 로드부터 저장까지 서비스 파이프라인 전체 동작 설정입니다.
    """

    id_property: Optional[str] = Field(
        default=None,
        description="Feature id 로 사용할 속성 이름. 미지정 시 Feature 의 id 사용"
    )

    properties: Optional[List[str]] = Field(
        default=None,
        description="출력에 유지할 속성 키 목록. None 이면 전체 유지, 빈 목록이면 전체 제거"
    )

    apply_filter: bool = Field(
        default=True,
        description="단순화 이후 필터 단계 실행 여부"
    )

    output_dir: str = Field(
        default="Result",
        description="출력 경로 미지정 시 결과를 저장할 폴더"
    )

    model_config = SettingsConfigDict(
        env_prefix="TOPO_PIPELINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
