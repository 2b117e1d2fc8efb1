"""
tests/core/parallel/test_parallel_types.py - 일괄 해석 결과 타입 테스트
"""

import pytest

from core.parallel.types import BatchResolutionResult, ResolutionOutcome, ResolutionStatus
from core.plan import ResourceDeclaration


def _outcome(status, address="aws_iam_role.app", **kwargs):
    declaration = ResourceDeclaration("aws_iam_role", "app", provider="aws", address=address)
    return ResolutionOutcome(declaration=declaration, status=status, **kwargs)


class TestResolutionStatus:
    @pytest.mark.parametrize(
        "status",
        [ResolutionStatus.API_ERROR, ResolutionStatus.DEADLINE_EXCEEDED, ResolutionStatus.ERROR],
    )
    def test_failures(self, status):
        assert status.is_failure

    @pytest.mark.parametrize(
        "status",
        [
            ResolutionStatus.RESOLVED,
            ResolutionStatus.EMPTY,
            ResolutionStatus.SKIPPED,
            ResolutionStatus.NOT_FOUND,
            ResolutionStatus.UNSUPPORTED,
            ResolutionStatus.NO_IMPORTER,
        ],
    )
    def test_not_failures(self, status):
        """건너뜀/없음은 실패가 아님"""
        assert not status.is_failure


class TestResolutionOutcome:
    """ResolutionOutcome 테스트"""

    def test_resolved_str(self):
        outcome = _outcome(ResolutionStatus.RESOLVED, identifier="app")

        assert outcome.resolved
        assert str(outcome) == "[OK] aws_iam_role.app -> app"

    def test_failure_str(self):
        outcome = _outcome(ResolutionStatus.NOT_FOUND, message="aws_iam_role not found app")

        assert not outcome.resolved
        assert str(outcome) == "[NOT_FOUND] aws_iam_role.app: aws_iam_role not found app"

    def test_str_without_address(self):
        outcome = _outcome(ResolutionStatus.RESOLVED, address="", identifier="app")

        assert str(outcome) == "[OK] aws_iam_role.app -> app"


class TestBatchResolutionResult:
    """BatchResolutionResult 테스트"""

    @pytest.fixture
    def result(self):
        return BatchResolutionResult(
            outcomes=[
                _outcome(ResolutionStatus.RESOLVED, identifier="a"),
                _outcome(ResolutionStatus.SKIPPED),
                _outcome(ResolutionStatus.RESOLVED, identifier="b"),
                _outcome(ResolutionStatus.API_ERROR),
            ]
        )

    def test_counts(self, result):
        assert result.total_count == 4
        assert [o.identifier for o in result.resolved] == ["a", "b"]
        assert len(result.failures) == 1
        assert len(result.by_status(ResolutionStatus.SKIPPED)) == 1
        assert result.has_failures()

    def test_status_counts(self, result):
        assert result.status_counts() == {
            ResolutionStatus.RESOLVED: 2,
            ResolutionStatus.SKIPPED: 1,
            ResolutionStatus.API_ERROR: 1,
        }

    def test_summary(self, result):
        assert result.get_summary() == "총 4건 (api_error: 1건, resolved: 2건, skipped: 1건)"

    def test_empty(self):
        result = BatchResolutionResult()

        assert result.total_count == 0
        assert not result.has_failures()
        assert result.get_summary() == "해석할 리소스 없음"
