"""
plugins/aws/importer.py - AWS Importer

boto3 Session 하나를 소유하고, 리소스 타입별 resolver로 dispatch합니다.
리전은 AWS_REGION 환경변수에서 읽고, 없으면 settings.DEFAULT_REGION을 사용합니다.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING

import boto3
from botocore.exceptions import BotoCoreError

from core.config import get_default_region
from core.exceptions import PluginLoadError, PluginNotInitializedError
from core.importer import Importer, Resolver

from .resolvers import RESOLVERS

if TYPE_CHECKING:
    from core.attributes import AttributeView
    from core.deadline import Deadline

logger = logging.getLogger(__name__)

AwsResolver = Callable[["boto3.Session", str, "AttributeView", "Deadline | None"], str]


class AwsImporter(Importer):
    """AWS import 식별자 해석기

    Example:
        importer = AwsImporter()
        importer.init()
        importer.get_import_name("aws_ecs_service", "web", {"cluster": "prod"})  # "prod/web"

        # 테스트/임베딩용: 미리 만든 세션 주입
        importer = AwsImporter(session=boto3.Session(region_name="us-east-1"))
    """

    name = "aws"

    def __init__(
        self,
        session: boto3.Session | None = None,
        region: str | None = None,
    ):
        self._session = session
        self._region = region
        super().__init__()
        if session is not None:
            self._mark_initialized()

    @property
    def session(self) -> boto3.Session:
        if self._session is None:
            raise PluginNotInitializedError(self.name)
        return self._session

    @property
    def region(self) -> str | None:
        if self._session is not None:
            return self._session.region_name
        return self._region

    def init(self) -> None:
        """boto3 Session 생성

        이미 세션이 있으면 교체하지 않습니다.

        Raises:
            PluginLoadError: 세션 생성 실패 (프로파일 없음 등)
        """
        if self._session is not None:
            logger.debug(f"[{self.name}] 이미 초기화됨 (region={self.region})")
            return

        region = self._region or get_default_region()
        try:
            self._session = boto3.Session(region_name=region)
        except BotoCoreError as e:
            raise PluginLoadError(self.name, "boto3 세션 생성 실패", cause=e) from e

        self._mark_initialized()
        logger.info(f"[{self.name}] 세션 초기화 (region={region})")

    def build_resolvers(self) -> Mapping[str, Resolver]:
        return {resource_type: self._bind(func) for resource_type, func in RESOLVERS.items()}

    def _bind(self, func: AwsResolver) -> Resolver:
        # 세션은 init() 이후에 생기므로 호출 시점에 읽음
        def resolver(name: str, attributes: AttributeView, deadline: Deadline | None = None) -> str:
            return func(self.session, name, attributes, deadline)

        resolver.__name__ = func.__name__
        resolver.__doc__ = func.__doc__
        return resolver
