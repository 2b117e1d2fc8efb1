"""
tests/conftest.py - pytest 공통 픽스처

AWS API 모킹과 테스트 헬퍼를 제공합니다.

Usage:
    def test_something(mock_session, aws_clients):
        aws_clients["ec2"].describe_security_groups.return_value = {...}
"""

import sys
from pathlib import Path
from typing import Any, Dict, List
from unittest.mock import MagicMock

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


# =============================================================================
# 환경 설정
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """테스트 환경 설정 (실제 자격 증명/프로파일 사용 방지)"""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_REGION", "eu-central-1")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-central-1")
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    monkeypatch.delenv("AWS_DEFAULT_PROFILE", raising=False)
    monkeypatch.delenv("IMPORTER_API_MAX_ATTEMPTS", raising=False)

    yield


# =============================================================================
# AWS 모킹 픽스처
# =============================================================================


class _ClientMap(dict):
    """서비스 이름별 MagicMock 클라이언트 (처음 요청 시 생성)"""

    def __missing__(self, key: str) -> MagicMock:
        client = MagicMock(name=f"{key}_client")
        self[key] = client
        return client


@pytest.fixture
def aws_clients():
    """서비스별 boto3 클라이언트 모킹"""
    return _ClientMap()


@pytest.fixture
def mock_session(aws_clients):
    """boto3.Session 모킹 - session.client(service)는 aws_clients[service] 반환"""
    session = MagicMock(name="session")
    session.region_name = "eu-central-1"
    session.client.side_effect = lambda service_name, **kwargs: aws_clients[service_name]
    return session


@pytest.fixture
def aws_importer(mock_session):
    """모킹 세션이 주입된 AwsImporter"""
    from plugins.aws.importer import AwsImporter

    return AwsImporter(session=mock_session)


# =============================================================================
# 유틸리티 함수
# =============================================================================


def set_pages(client: MagicMock, operation: str, pages: List[Dict[str, Any]]) -> MagicMock:
    """client.get_paginator(operation).paginate(...)가 pages를 돌려주도록 설정"""
    paginator = MagicMock(name=f"{operation}_paginator")
    paginator.paginate.return_value = pages
    client.get_paginator.side_effect = lambda name: paginator if name == operation else MagicMock()
    return paginator


def create_mock_client_error(
    error_code: str,
    error_message: str = "Test error",
    operation: str = "TestOperation",
) -> Exception:
    """ClientError 생성 헬퍼"""
    from botocore.exceptions import ClientError

    return ClientError(
        {
            "Error": {
                "Code": error_code,
                "Message": error_message,
            }
        },
        operation,
    )


# =============================================================================
# moto 통합
# =============================================================================


@pytest.fixture
def moto_session():
    """moto mock_aws 안에서 만든 실제 boto3.Session"""
    import boto3
    from moto import mock_aws

    with mock_aws():
        yield boto3.Session(region_name="eu-central-1")


@pytest.fixture
def client_error():
    """ClientError 팩토리 픽스처"""
    return create_mock_client_error


@pytest.fixture
def pages():
    """paginator 설정 헬퍼 픽스처"""
    return set_pages
