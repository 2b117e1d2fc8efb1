"""
core/parallel - 병렬 처리 모듈

여러 리소스 선언의 import 식별자를 병렬로 해석합니다.

주요 구성 요소:
- ParallelResolver: ThreadPoolExecutor 기반 일괄 해석기
- parallel_resolve: 간편한 일괄 해석 함수
- get_client: 타임아웃/deadline이 적용된 boto3 client 생성

Example:
    from core.parallel import parallel_resolve

    result = parallel_resolve(registry, declarations, max_workers=10)
    print(result.get_summary())
"""

from .client import get_client
from .errors import categorize_error, categorize_error_code
from .executor import ParallelConfig, ParallelResolver, parallel_resolve, resolve_declaration
from .types import BatchResolutionResult, ErrorCategory, ResolutionOutcome, ResolutionStatus

__all__: list[str] = [
    # Executor
    "ParallelResolver",
    "ParallelConfig",
    "parallel_resolve",
    "resolve_declaration",
    # Client
    "get_client",
    # Error handling
    "categorize_error",
    "categorize_error_code",
    # Types
    "ErrorCategory",
    "ResolutionStatus",
    "ResolutionOutcome",
    "BatchResolutionResult",
]
