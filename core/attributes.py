"""
core/attributes.py - 선언된 리소스 설정값의 타입 접근자

IaC 파서가 넘겨준 설정(속성 이름 -> 동적 타입 값)을 태그드 유니온으로
감싸고, 기대 타입이 아니면 건너뛰기 예외를 발생시키는 엄격한 접근자를 제공합니다.

Example:
    view = AttributeView.from_mapping({"vpc_id": "vpc-123", "port": 80})

    view.require_string("vpc_id", "web")     # "vpc-123"
    view.require_string("port", "web")       # SkipResourceError (number)
    view["missing"].type_name                # "null"
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from core.exceptions import SkipResourceError


class AttributeKind(Enum):
    """속성값 타입 태그"""

    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    LIST = "list"
    MAP = "map"
    NULL = "null"
    UNKNOWN = "unknown"  # plan 시점에 알 수 없음 (known after apply)


@dataclass(frozen=True)
class AttributeValue:
    """동적 타입 속성값"""

    kind: AttributeKind
    raw: Any = None

    @classmethod
    def of(cls, value: Any) -> AttributeValue:
        """JSON 디코딩된 Python 값을 분류

        bool은 int의 서브클래스이므로 숫자보다 먼저 검사합니다.
        """
        if isinstance(value, AttributeValue):
            return value
        if value is None:
            return cls(AttributeKind.NULL)
        if isinstance(value, bool):
            return cls(AttributeKind.BOOL, value)
        if isinstance(value, (int, float)):
            return cls(AttributeKind.NUMBER, value)
        if isinstance(value, str):
            return cls(AttributeKind.STRING, value)
        if isinstance(value, Mapping):
            return cls(AttributeKind.MAP, dict(value))
        if isinstance(value, (list, tuple, set, frozenset)):
            return cls(AttributeKind.LIST, list(value))
        raise TypeError(f"unsupported attribute value type: {type(value).__name__}")

    @classmethod
    def null(cls) -> AttributeValue:
        return cls(AttributeKind.NULL)

    @classmethod
    def unknown(cls) -> AttributeValue:
        return cls(AttributeKind.UNKNOWN)

    @property
    def type_name(self) -> str:
        return self.kind.value

    @property
    def is_string(self) -> bool:
        return self.kind is AttributeKind.STRING

    @property
    def is_known(self) -> bool:
        return self.kind is not AttributeKind.UNKNOWN

    def as_string(self) -> str:
        """STRING이 아니면 TypeError"""
        if not self.is_string:
            raise TypeError(f"expected string, got {self.type_name}")
        return self.raw


_NULL = AttributeValue.null()


class AttributeView(Mapping[str, AttributeValue]):
    """리소스 하나의 읽기 전용 속성 뷰

    해석 호출 한 번 동안만 사용됩니다. 없는 키는 예외 대신 null 값을 돌려줍니다.
    """

    def __init__(self, values: Mapping[str, AttributeValue] | None = None):
        self._values: dict[str, AttributeValue] = dict(values or {})

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, Any] | None,
        unknown: Iterable[str] = (),
    ) -> AttributeView:
        """일반 dict로부터 생성

        Args:
            data: 속성 이름 -> JSON 값
            unknown: plan 시점에 값이 정해지지 않은 속성 이름들
        """
        values = {key: AttributeValue.of(value) for key, value in (data or {}).items()}
        for key in unknown:
            values[key] = AttributeValue.unknown()
        return cls(values)

    def __getitem__(self, key: str) -> AttributeValue:
        return self._values.get(key, _NULL)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __repr__(self) -> str:
        return f"AttributeView({sorted(self._values)})"

    def require_string(self, key: str, resource_name: str, label: str | None = None) -> str:
        """string 속성 추출

        Args:
            key: 속성 이름
            resource_name: 선언된 리소스 이름 (에러 메시지용)
            label: 에러 메시지에 쓸 사람이 읽는 이름 (예: "vpc id")

        Raises:
            SkipResourceError: 속성이 없거나 string이 아님
        """
        value = self[key]
        if not value.is_string:
            raise SkipResourceError(
                resource_name=resource_name,
                attribute=key,
                actual_type=value.type_name,
                label=label,
            )
        return value.raw

    def to_dict(self) -> dict[str, Any]:
        """알려진 값만 원시 Python 값으로 반환"""
        return {key: value.raw for key, value in self._values.items() if value.is_known}
