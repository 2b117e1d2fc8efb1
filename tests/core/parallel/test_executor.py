"""
tests/core/parallel/test_executor.py - ParallelResolver 테스트
"""

import threading
import time

import pytest

from core.attributes import AttributeView
from core.exceptions import (
    APICallError,
    DeadlineExceededError,
    PluginNotInitializedError,
    ResourceNotFoundError,
)
from core.importer import Importer
from core.parallel.executor import ParallelConfig, ParallelResolver, parallel_resolve, resolve_declaration
from core.parallel.types import ErrorCategory, ResolutionStatus
from core.plan import ResourceDeclaration
from core.registry import ImporterRegistry


class ScriptedImporter(Importer):
    """리소스 타입별 동작을 지정할 수 있는 테스트용 importer"""

    name = "aws"

    def init(self):
        self._mark_initialized()

    def build_resolvers(self):
        return {
            "aws_iam_role": lambda name, attributes, deadline=None: name,
            "aws_ecr_repository": lambda name, attributes, deadline=None: "",
            "aws_security_group": self._security_group,
            "aws_db_instance": self._not_found,
            "aws_elasticache_cluster": self._api_error,
            "aws_ssm_parameter": self._deadline,
            "aws_ecs_service": self._bug,
            "aws_service_discovery_service": self._slow,
        }

    def _security_group(self, name, attributes, deadline=None):
        return f"sg-{attributes.require_string('vpc_id', name)}"

    def _not_found(self, name, attributes, deadline=None):
        raise ResourceNotFoundError("aws_db_instance", name)

    def _api_error(self, name, attributes, deadline=None):
        raise APICallError("elasticache", "describe_cache_clusters", error_code="ThrottlingException")

    def _deadline(self, name, attributes, deadline=None):
        raise DeadlineExceededError("ssm.get_parameter")

    def _bug(self, name, attributes, deadline=None):
        raise KeyError("services")

    def _slow(self, name, attributes, deadline=None):
        time.sleep(float(name))
        return name


@pytest.fixture
def importer():
    scripted = ScriptedImporter()
    scripted.init()
    return scripted


@pytest.fixture
def registry(importer):
    registry = ImporterRegistry()
    registry.register(importer)
    registry.freeze()
    return registry


def _decl(resource_type, name, attributes=None, provider="aws"):
    return ResourceDeclaration(
        resource_type=resource_type,
        name=name,
        attributes=AttributeView.from_mapping(attributes or {}),
        provider=provider,
        address=f"{resource_type}.{name}",
    )


class TestParallelConfig:
    """ParallelConfig 테스트"""

    def test_default_values(self):
        config = ParallelConfig()

        assert config.max_workers == 10
        assert config.timeout is None

    def test_max_workers_capped(self):
        assert ParallelConfig(max_workers=500).max_workers == 100

    def test_invalid_max_workers(self):
        with pytest.raises(ValueError):
            ParallelConfig(max_workers=0)


class TestResolveDeclaration:
    """선언 하나의 상태 분류"""

    @pytest.mark.parametrize(
        "decl,status",
        [
            (_decl("aws_iam_role", "app"), ResolutionStatus.RESOLVED),
            (_decl("aws_ecr_repository", "repo"), ResolutionStatus.EMPTY),
            (_decl("aws_security_group", "web"), ResolutionStatus.SKIPPED),
            (_decl("aws_db_instance", "main"), ResolutionStatus.NOT_FOUND),
            (_decl("aws_s3_bucket", "logs"), ResolutionStatus.UNSUPPORTED),
            (_decl("google_storage_bucket", "logs", provider="google"), ResolutionStatus.NO_IMPORTER),
            (_decl("aws_elasticache_cluster", "cache"), ResolutionStatus.API_ERROR),
            (_decl("aws_ssm_parameter", "p"), ResolutionStatus.DEADLINE_EXCEEDED),
        ],
    )
    def test_status(self, registry, decl, status):
        outcome = resolve_declaration(registry, decl)

        assert outcome.status is status
        assert outcome.declaration is decl
        assert outcome.duration_ms >= 0

    def test_resolved_identifier(self, registry):
        outcome = resolve_declaration(registry, _decl("aws_security_group", "web", {"vpc_id": "vpc-1"}))

        assert outcome.identifier == "sg-vpc-1"
        assert outcome.message == ""

    def test_api_error_category(self, registry):
        outcome = resolve_declaration(registry, _decl("aws_elasticache_cluster", "cache"))

        assert outcome.category is ErrorCategory.THROTTLING
        assert "ThrottlingException" in outcome.message

    def test_skip_message(self, registry):
        outcome = resolve_declaration(registry, _decl("aws_security_group", "web"))

        assert "vpc_id" in outcome.message

    def test_not_initialized_is_error(self):
        registry = ImporterRegistry()
        registry.register(ScriptedImporter())

        outcome = resolve_declaration(registry, _decl("aws_iam_role", "app"))

        assert outcome.status is ResolutionStatus.ERROR
        assert str(PluginNotInitializedError("aws")) in outcome.message


class TestParallelResolver:
    """ParallelResolver 테스트"""

    def test_preserves_input_order(self, registry):
        declarations = [
            _decl("aws_service_discovery_service", "0.2"),
            _decl("aws_service_discovery_service", "0.0"),
            _decl("aws_service_discovery_service", "0.1"),
        ]

        result = ParallelResolver(registry, ParallelConfig(max_workers=3)).execute(declarations)

        assert [o.identifier for o in result.outcomes] == ["0.2", "0.0", "0.1"]

    def test_unexpected_exception_becomes_error(self, registry):
        result = ParallelResolver(registry).execute([_decl("aws_ecs_service", "api"), _decl("aws_iam_role", "app")])

        assert result.outcomes[0].status is ResolutionStatus.ERROR
        assert "KeyError" in result.outcomes[0].message
        assert result.outcomes[1].resolved

    def test_on_complete(self, registry):
        seen = []
        lock = threading.Lock()

        def on_complete(outcome):
            with lock:
                seen.append(outcome.declaration.name)

        declarations = [_decl("aws_iam_role", f"role-{i}") for i in range(5)]
        ParallelResolver(registry).execute(declarations, on_complete=on_complete)

        assert sorted(seen) == [f"role-{i}" for i in range(5)]

    def test_empty(self, registry):
        result = ParallelResolver(registry).execute([])

        assert result.total_count == 0

    def test_timeout_passes_deadline(self, importer, registry):
        received = []

        def capture(name, attributes, deadline=None):
            received.append(deadline)
            return name

        importer._resolvers["aws_iam_role"] = capture

        ParallelResolver(registry, ParallelConfig(timeout=30)).execute([_decl("aws_iam_role", "app")])
        ParallelResolver(registry).execute([_decl("aws_iam_role", "app")])

        assert received[0] is not None
        assert 0 < received[0].remaining() <= 30
        assert received[1] is None


class TestParallelResolve:
    def test_mixed_batch(self, registry):
        declarations = [
            _decl("aws_iam_role", "app"),
            _decl("aws_security_group", "web", {"vpc_id": "vpc-1"}),
            _decl("aws_db_instance", "main"),
            _decl("aws_elasticache_cluster", "cache"),
        ]

        result = parallel_resolve(registry, declarations, max_workers=2)

        assert [o.status for o in result.outcomes] == [
            ResolutionStatus.RESOLVED,
            ResolutionStatus.RESOLVED,
            ResolutionStatus.NOT_FOUND,
            ResolutionStatus.API_ERROR,
        ]
        assert result.has_failures()
        assert len(result.failures) == 1
