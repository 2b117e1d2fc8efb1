"""
core/importer.py - Importer(프로바이더 플러그인) 기본 클래스

원격 시스템 하나당 Importer 하나가 세션 핸들과 dispatch 테이블
(리소스 타입 -> resolver)을 소유합니다. dispatch 테이블은 생성 시점에 한 번 만들어지며,
새 리소스 타입은 테이블에 항목을 추가하는 것으로 확장합니다.

Example:
    class MyImporter(Importer):
        name = "my"

        def init(self) -> None:
            self.client = connect()
            self._mark_initialized()

        def build_resolvers(self) -> dict[str, Resolver]:
            return {"my_bucket": self._resolve_bucket}
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from core.attributes import AttributeView
from core.exceptions import PluginNotInitializedError, UnsupportedResourceTypeError

if TYPE_CHECKING:
    from core.deadline import Deadline

logger = logging.getLogger(__name__)

# (선언 이름, 속성 뷰, deadline) -> import 식별자
Resolver = Callable[[str, AttributeView, "Deadline | None"], str]


class Importer(ABC):
    """모든 Importer가 구현해야 하는 추상 기본 클래스

    Attributes:
        name: 레지스트리 조회와 plan 라우팅에 쓰이는 고정 이름
    """

    name: str = ""

    def __init__(self) -> None:
        self._initialized = False
        self._resolvers: dict[str, Resolver] = dict(self.build_resolvers())

    @abstractmethod
    def init(self) -> None:
        """원격 연결/세션 수립 (resolve 전에 한 번 호출)

        Raises:
            PluginLoadError: 초기화 실패 - 이 importer는 요청을 처리할 수 없음
        """

    @abstractmethod
    def build_resolvers(self) -> Mapping[str, Resolver]:
        """리소스 타입 -> resolver dispatch 테이블"""

    def importer_name(self) -> str:
        return self.name

    @property
    def initialized(self) -> bool:
        return self._initialized

    def _mark_initialized(self) -> None:
        self._initialized = True

    def supports(self, resource_type: str) -> bool:
        return resource_type in self._resolvers

    def supported_types(self) -> list[str]:
        return sorted(self._resolvers)

    def get_import_name(
        self,
        resource_type: str,
        name: str,
        attributes: AttributeView | Mapping[str, Any] | None = None,
        deadline: Deadline | None = None,
    ) -> str:
        """선언된 리소스의 import 식별자 해석

        Args:
            resource_type: 리소스 타입 (예: "aws_security_group")
            name: 선언된 리소스 이름
            attributes: 선언된 설정 (AttributeView 또는 일반 dict)
            deadline: 호출자 deadline (선택)

        Returns:
            import 식별자. 빈 문자열은 "식별자 없음, 에러 없음"을 뜻합니다.

        Raises:
            UnsupportedResourceTypeError: dispatch 테이블에 없는 타입 (네트워크 호출 없음)
            PluginNotInitializedError: init() 전에 호출
            SkipResourceError: 필수 속성 누락/타입 불일치
            ResourceNotFoundError: 원격에 일치하는 리소스 없음
            APICallError: 원격 API 호출 실패 (resolver별 정책에 따름)
            DeadlineExceededError: deadline 초과
        """
        resolver = self._resolvers.get(resource_type)
        if resolver is None:
            raise UnsupportedResourceTypeError(self.name, resource_type)

        if not self._initialized:
            raise PluginNotInitializedError(self.name)

        if not isinstance(attributes, AttributeView):
            attributes = AttributeView.from_mapping(attributes)

        logger.debug(f"[{self.name}] resolve {resource_type} {name}")
        return resolver(name, attributes, deadline)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r} types={len(self._resolvers)}>"
