"""
core/config.py - 중앙 설정 관리

애플리케이션 전역 설정값과 환경변수 헬퍼를 제공합니다.

Usage:
    from core.config import settings, get_default_region

    region = get_default_region()  # AWS_REGION 또는 "eu-central-1"
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from importlib import metadata

from core.exceptions import ConfigError

PACKAGE_NAME = "terraform-plan-importer"


@dataclass(frozen=True)
class Settings:
    """불변 전역 설정"""

    # 리전 (AWS_REGION 미설정 시)
    DEFAULT_REGION: str = "eu-central-1"

    # API 호출 (재시도는 호출자 책임이므로 기본 1회)
    API_MAX_ATTEMPTS: int = 1
    API_CONNECT_TIMEOUT: int = 10  # 초
    API_READ_TIMEOUT: int = 30  # 초

    # 일괄 해석
    MAX_WORKERS: int = 10


settings = Settings()


# =============================================================================
# 환경변수 헬퍼
# =============================================================================


def get_default_region() -> str:
    """기본 리전 반환

    AWS_REGION 환경변수가 없으면 settings.DEFAULT_REGION을 사용합니다.
    """
    region = os.environ.get("AWS_REGION")
    if region:
        return region
    return settings.DEFAULT_REGION


def get_env_int(key: str, default: int) -> int:
    """환경변수를 int로 변환 (누락/파싱 실패 시 default)"""
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def get_api_max_attempts() -> int:
    """botocore max_attempts (IMPORTER_API_MAX_ATTEMPTS로 재정의, 최소 1)"""
    return max(1, get_env_int("IMPORTER_API_MAX_ATTEMPTS", settings.API_MAX_ATTEMPTS))


@lru_cache(maxsize=1)
def get_version() -> str:
    """설치된 패키지 버전 (개발 체크아웃이면 0.0.0.dev0)"""
    try:
        return metadata.version(PACKAGE_NAME)
    except metadata.PackageNotFoundError:
        return "0.0.0.dev0"


# =============================================================================
# 로깅 설정
# =============================================================================


@dataclass
class LogConfig:
    """로깅 설정

    CLI 진입점에서 logging.basicConfig에 그대로 전달됩니다.
    """

    level: str = "WARNING"
    format: str = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def from_env(cls) -> LogConfig:
        """LOG_LEVEL / LOG_FORMAT 환경변수에서 로드

        Raises:
            ConfigError: LOG_LEVEL이 logging 레벨 이름이 아님
        """
        config = cls()
        config.level = os.environ.get("LOG_LEVEL", config.level).strip().upper()
        # getLevelName은 등록된 이름이면 int, 아니면 "Level X" 문자열
        if not isinstance(logging.getLevelName(config.level), int):
            raise ConfigError("LOG_LEVEL", f"알 수 없는 로그 레벨: {config.level}")
        config.format = os.environ.get("LOG_FORMAT", config.format)
        return config
