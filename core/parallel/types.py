"""
core/parallel/types.py - 일괄 해석 결과 타입

선언 하나의 해석 결과(ResolutionOutcome)와 전체 결과(BatchResolutionResult)를 정의합니다.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.plan import ResourceDeclaration


class ErrorCategory(Enum):
    """API 에러 카테고리"""

    THROTTLING = "throttling"
    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"
    NETWORK = "network"
    TIMEOUT = "timeout"
    EXPIRED_TOKEN = "expired_token"
    INVALID_REQUEST = "invalid_request"
    SERVICE_ERROR = "service_error"
    UNKNOWN = "unknown"


class ResolutionStatus(Enum):
    """선언 하나의 해석 상태"""

    RESOLVED = "resolved"  # 식별자 있음
    EMPTY = "empty"  # 에러 없이 식별자 없음 (API 오류 무시 resolver)
    SKIPPED = "skipped"  # 속성 누락/타입 불일치
    NOT_FOUND = "not_found"  # 원격에 없음
    UNSUPPORTED = "unsupported"  # dispatch 테이블에 없는 타입
    NO_IMPORTER = "no_importer"  # provider에 해당하는 importer 없음
    API_ERROR = "api_error"  # 원격 API 실패
    DEADLINE_EXCEEDED = "deadline_exceeded"
    ERROR = "error"  # 그 외

    @property
    def is_failure(self) -> bool:
        return self in (
            ResolutionStatus.API_ERROR,
            ResolutionStatus.DEADLINE_EXCEEDED,
            ResolutionStatus.ERROR,
        )


@dataclass
class ResolutionOutcome:
    """선언 하나의 해석 결과

    Attributes:
        declaration: 해석 대상
        status: 해석 상태
        identifier: import 식별자 (RESOLVED일 때만)
        message: 실패/건너뜀 사유
        category: API_ERROR일 때 에러 카테고리
        duration_ms: 실행 시간 (밀리초)
    """

    declaration: ResourceDeclaration
    status: ResolutionStatus
    identifier: str = ""
    message: str = ""
    category: ErrorCategory | None = None
    duration_ms: float = 0.0

    @property
    def resolved(self) -> bool:
        return self.status is ResolutionStatus.RESOLVED

    def __str__(self) -> str:
        target = self.declaration.address or f"{self.declaration.resource_type}.{self.declaration.name}"
        if self.resolved:
            return f"[OK] {target} -> {self.identifier}"
        return f"[{self.status.value.upper()}] {target}: {self.message}"


@dataclass
class BatchResolutionResult:
    """일괄 해석 결과 (입력 순서 유지)"""

    outcomes: list[ResolutionOutcome] = field(default_factory=list)

    @property
    def total_count(self) -> int:
        return len(self.outcomes)

    @property
    def resolved(self) -> list[ResolutionOutcome]:
        return [o for o in self.outcomes if o.resolved]

    @property
    def failures(self) -> list[ResolutionOutcome]:
        return [o for o in self.outcomes if o.status.is_failure]

    def by_status(self, status: ResolutionStatus) -> list[ResolutionOutcome]:
        return [o for o in self.outcomes if o.status is status]

    def has_failures(self) -> bool:
        return any(o.status.is_failure for o in self.outcomes)

    def status_counts(self) -> dict[ResolutionStatus, int]:
        return dict(Counter(o.status for o in self.outcomes))

    def get_summary(self) -> str:
        """상태별 건수 요약 (예: "총 3건 (resolved: 2건, skipped: 1건)")"""
        if not self.outcomes:
            return "해석할 리소스 없음"

        counts = self.status_counts()
        parts = [f"{status.value}: {count}건" for status, count in sorted(counts.items(), key=lambda x: x[0].value)]
        return f"총 {self.total_count}건 ({', '.join(parts)})"
