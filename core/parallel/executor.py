"""
core/parallel/executor.py - 일괄 해석 실행기

여러 ResourceDeclaration을 ThreadPoolExecutor로 병렬 해석합니다.
각 해석 호출은 서로 독립적이며, 결과는 입력 순서대로 반환됩니다.
재시도는 하지 않습니다.

Example:
    from core.parallel import parallel_resolve

    result = parallel_resolve(registry, declarations, max_workers=10, timeout=60)
    for outcome in result.resolved:
        print(render_import_command(outcome.declaration, outcome.identifier))
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import TYPE_CHECKING

from core.config import settings
from core.deadline import Deadline
from core.exceptions import (
    APICallError,
    DeadlineExceededError,
    ImporterError,
    ResourceNotFoundError,
    SkipResourceError,
    UnsupportedResourceTypeError,
)

from .errors import categorize_error
from .types import BatchResolutionResult, ResolutionOutcome, ResolutionStatus

if TYPE_CHECKING:
    from core.plan import ResourceDeclaration
    from core.registry import ImporterRegistry

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ResolutionOutcome], None]


@dataclass
class ParallelConfig:
    """병렬 실행 설정

    Attributes:
        max_workers: 최대 동시 스레드 수 (1~100)
        timeout: 전체 일괄 해석 시간 예산 (초, None이면 제한 없음)
    """

    max_workers: int = settings.MAX_WORKERS
    timeout: float | None = None

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.max_workers > 100:
            self.max_workers = 100


def resolve_declaration(
    registry: ImporterRegistry,
    declaration: ResourceDeclaration,
    deadline: Deadline | None = None,
) -> ResolutionOutcome:
    """선언 하나를 해석하고 예외를 ResolutionStatus로 분류"""
    start = time.monotonic()

    def outcome(status: ResolutionStatus, **kwargs) -> ResolutionOutcome:
        return ResolutionOutcome(
            declaration=declaration,
            status=status,
            duration_ms=(time.monotonic() - start) * 1000,
            **kwargs,
        )

    importer = registry.get(declaration.provider)
    if importer is None:
        return outcome(ResolutionStatus.NO_IMPORTER, message=f"importer not registered: {declaration.provider}")

    try:
        identifier = importer.get_import_name(
            declaration.resource_type,
            declaration.name,
            declaration.attributes,
            deadline=deadline,
        )
    except UnsupportedResourceTypeError as e:
        return outcome(ResolutionStatus.UNSUPPORTED, message=str(e))
    except SkipResourceError as e:
        return outcome(ResolutionStatus.SKIPPED, message=str(e))
    except ResourceNotFoundError as e:
        return outcome(ResolutionStatus.NOT_FOUND, message=str(e))
    except APICallError as e:
        return outcome(ResolutionStatus.API_ERROR, message=str(e), category=categorize_error(e))
    except DeadlineExceededError as e:
        return outcome(ResolutionStatus.DEADLINE_EXCEEDED, message=str(e))
    except ImporterError as e:
        return outcome(ResolutionStatus.ERROR, message=str(e))

    if not identifier:
        return outcome(ResolutionStatus.EMPTY, message="no identifier")
    return outcome(ResolutionStatus.RESOLVED, identifier=identifier)


class ParallelResolver:
    """병렬 일괄 해석기

    Example:
        resolver = ParallelResolver(registry, ParallelConfig(max_workers=5, timeout=120))
        result = resolver.execute(declarations)
        print(result.get_summary())
    """

    def __init__(
        self,
        registry: ImporterRegistry,
        config: ParallelConfig | None = None,
    ):
        self.registry = registry
        self.config = config or ParallelConfig()

    def execute(
        self,
        declarations: Sequence[ResourceDeclaration],
        on_complete: ProgressCallback | None = None,
    ) -> BatchResolutionResult:
        """모든 선언을 병렬 해석

        Args:
            declarations: 해석 대상
            on_complete: 각 선언 완료 시 호출 (완료 순서)

        Returns:
            입력 순서를 유지한 BatchResolutionResult
        """
        if not declarations:
            logger.warning("해석할 리소스가 없습니다")
            return BatchResolutionResult()

        deadline = Deadline.after(self.config.timeout) if self.config.timeout else None
        outcomes: list[ResolutionOutcome | None] = [None] * len(declarations)

        logger.info(f"일괄 해석 시작: {len(declarations)}개, max_workers={self.config.max_workers}")
        start_time = time.monotonic()

        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            futures = {
                executor.submit(resolve_declaration, self.registry, declaration, deadline): index
                for index, declaration in enumerate(declarations)
            }

            for future in as_completed(futures):
                index = futures[future]
                try:
                    result = future.result()
                except Exception as e:
                    # 분류되지 않은 예외 (resolver 버그 등)
                    logger.error(f"해석 중 예외 [{declarations[index].address}]: {e}")
                    result = ResolutionOutcome(
                        declaration=declarations[index],
                        status=ResolutionStatus.ERROR,
                        message=f"{e.__class__.__name__}: {e}",
                    )

                outcomes[index] = result
                if on_complete:
                    on_complete(result)

        batch = BatchResolutionResult(outcomes=[o for o in outcomes if o is not None])
        total_time = (time.monotonic() - start_time) * 1000
        logger.info(f"일괄 해석 완료: {batch.get_summary()}, 총 {total_time:.0f}ms")
        return batch


def parallel_resolve(
    registry: ImporterRegistry,
    declarations: Sequence[ResourceDeclaration],
    max_workers: int = settings.MAX_WORKERS,
    timeout: float | None = None,
    on_complete: ProgressCallback | None = None,
) -> BatchResolutionResult:
    """간편한 병렬 해석 함수"""
    config = ParallelConfig(max_workers=max_workers, timeout=timeout)
    return ParallelResolver(registry, config).execute(declarations, on_complete=on_complete)
