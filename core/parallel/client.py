"""
core/parallel/client.py - boto3 client 생성 헬퍼

타임아웃 + 재시도 횟수가 설정된 boto3 client를 생성합니다.
재시도 정책은 호출자 책임이므로 기본 max_attempts는 1(재시도 없음)이며,
Deadline이 주어지면 호출 전에 만료 여부를 확인하고 타임아웃을 남은 시간으로 제한합니다.

Example:
    from core.parallel.client import get_client

    ec2 = get_client(session, "ec2")
    ec2 = get_client(session, "ec2", deadline=Deadline.after(10))
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal, cast

from core.config import get_api_max_attempts, settings

if TYPE_CHECKING:
    import boto3

    from core.deadline import Deadline

# Retry mode 타입 (botocore TypedDict와 호환)
RetryMode = Literal["legacy", "standard", "adaptive"]

DEFAULT_RETRY_MODE: RetryMode = "standard"


def get_client(
    session: boto3.Session,
    service_name: str,
    region_name: str | None = None,
    deadline: Deadline | None = None,
    max_attempts: int | None = None,
    retry_mode: RetryMode = DEFAULT_RETRY_MODE,
    connect_timeout: int = settings.API_CONNECT_TIMEOUT,
    read_timeout: int = settings.API_READ_TIMEOUT,
    **kwargs: Any,
) -> Any:
    """타임아웃이 적용된 boto3 client 생성

    Args:
        session: boto3 Session
        service_name: AWS 서비스 이름 (ec2, ecs, iam 등)
        region_name: 리전 (None이면 세션 기본값)
        deadline: 호출자 deadline (None이면 제한 없음)
        max_attempts: 최대 시도 횟수 (None이면 IMPORTER_API_MAX_ATTEMPTS 또는 1)
        retry_mode: 재시도 모드
        connect_timeout: 연결 타임아웃 (초)
        read_timeout: 읽기 타임아웃 (초)
        **kwargs: session.client()에 전달할 추가 인자

    Returns:
        boto3 client

    Raises:
        DeadlineExceededError: deadline이 이미 지남
    """
    from botocore.config import Config

    if deadline is not None:
        deadline.check(f"{service_name} client")
        connect_timeout = deadline.cap_timeout(connect_timeout)
        read_timeout = deadline.cap_timeout(read_timeout)

    config = Config(
        retries={"max_attempts": max_attempts or get_api_max_attempts(), "mode": retry_mode},  # pyright: ignore[reportArgumentType]
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
    )

    # 기존 config가 있으면 병합
    if "config" in kwargs:
        existing = kwargs.pop("config")
        config = config.merge(existing)

    # cast to Any to bypass boto3-stubs Literal type requirements
    return session.client(  # pyright: ignore[reportCallIssue]
        cast(Any, service_name),
        region_name=region_name,
        config=config,
        **kwargs,
    )
