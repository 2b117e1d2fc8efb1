"""
core/deadline.py - 호출자 지정 deadline

해석 호출은 원격 API에서 블로킹될 수 있으므로, 호출자가 시간 예산을 넘기면
다음 API 호출 전에 중단할 수 있도록 resolver까지 Deadline을 전달합니다.
재시도/백오프는 하지 않습니다.

Example:
    deadline = Deadline.after(30)
    importer.get_import_name("aws_iam_role", "app", {}, deadline=deadline)
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass

from core.exceptions import DeadlineExceededError


@dataclass(frozen=True)
class Deadline:
    """monotonic 시계 기준 만료 시각"""

    expires_at: float

    @classmethod
    def after(cls, seconds: float) -> Deadline:
        if seconds <= 0:
            raise ValueError(f"seconds must be > 0, got {seconds}")
        return cls(time.monotonic() + seconds)

    def remaining(self) -> float:
        """남은 시간 (초, 음수 없음)"""
        return max(0.0, self.expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0

    def check(self, operation: str = "") -> None:
        """만료되었으면 DeadlineExceededError"""
        if self.expired:
            raise DeadlineExceededError(operation)

    def cap_timeout(self, timeout: int) -> int:
        """botocore 타임아웃을 남은 시간으로 제한 (최소 1초)"""
        return max(1, min(timeout, math.ceil(self.remaining())))
