"""
core/exceptions.py - 통합 예외 계층 구조

import 식별자 해석 과정에서 사용되는 예외 클래스들을 정의합니다.
호출자는 예외 타입으로 "건너뛰기", "원격에 없음", "일시적 API 실패",
"설정 오류"를 구분합니다.

예외 계층 구조:
    ImporterError (베이스)
    ├── ConfigurationError (지원하지 않는 리소스 타입 등 - 재시도 금지)
    │   └── UnsupportedResourceTypeError
    ├── ValidationError (입력 검증)
    │   └── SkipResourceError (속성 누락/타입 불일치 - 해당 리소스만 건너뜀)
    ├── ResourceNotFoundError (API 성공, 일치하는 리소스 없음)
    ├── APICallError (원격 API 호출 실패 - 네트워크, 인증, 쓰로틀링)
    ├── DeadlineExceededError (호출자가 지정한 시간 초과)
    ├── RegistryError (레지스트리)
    │   ├── ImporterNotFoundError
    │   ├── DuplicateImporterError
    │   └── RegistryFrozenError
    ├── PluginLoadError (플러그인 로드/초기화 실패)
    ├── PluginNotInitializedError
    └── ConfigError (설정값 오류)

Usage:
    from core.exceptions import SkipResourceError, ResourceNotFoundError

    try:
        identifier = importer.get_import_name("aws_security_group", "web", attrs)
    except SkipResourceError as e:
        logger.info(f"건너뜀: {e}")
    except ResourceNotFoundError:
        ...
"""

from __future__ import annotations

from typing import Any

# =============================================================================
# 베이스 예외
# =============================================================================


class ImporterError(Exception):
    """terraform-plan-importer 기본 예외 클래스

    모든 커스텀 예외의 베이스 클래스입니다.

    Attributes:
        message: 에러 메시지
        cause: 원인 예외 (체이닝용)
        details: 추가 상세 정보
    """

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """예외 정보를 딕셔너리로 반환"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "details": self.details,
        }


# =============================================================================
# 설정 오류 (dispatch 테이블에 없는 타입)
# =============================================================================


class ConfigurationError(ImporterError):
    """설정 오류

    일시적 장애가 아니므로 재시도하지 않고 항상 호출자에게 전달됩니다.
    """


class UnsupportedResourceTypeError(ConfigurationError):
    """importer가 처리할 수 없는 리소스 타입"""

    def __init__(self, importer_name: str, resource_type: str):
        message = f"resourceType not supported [{importer_name}]: {resource_type}"
        super().__init__(message)
        self.importer_name = importer_name
        self.resource_type = resource_type
        self.details.update({"importer": importer_name, "resource_type": resource_type})


# =============================================================================
# 입력 검증
# =============================================================================


class ValidationError(ImporterError):
    """입력 검증 오류"""

    def __init__(
        self,
        field: str,
        value: Any,
        expected: str,
        cause: Exception | None = None,
    ):
        message = f"검증 오류 [{field}]: 예상값 '{expected}', 실제값 '{value}'"
        super().__init__(message, cause)
        self.field = field
        self.value = value
        self.expected = expected
        self.details.update(
            {
                "field": field,
                "value": str(value),
                "expected": expected,
            }
        )


class SkipResourceError(ValidationError):
    """필수 속성이 없거나 타입이 맞지 않아 리소스를 건너뛰어야 함

    호출자는 전체 실행을 중단하지 않고 이 리소스만 건너뜁니다.
    """

    def __init__(
        self,
        resource_name: str,
        attribute: str,
        actual_type: str,
        expected: str = "string",
        label: str | None = None,
    ):
        super().__init__(field=attribute, value=actual_type, expected=expected)
        self.resource_name = resource_name
        self.attribute = attribute
        self.actual_type = actual_type
        self.label = label or attribute
        self.message = (
            f"skipping {resource_name} because its {self.label} ({attribute}) "
            f"was not a {expected} but {actual_type}"
        )
        self.args = (self.message,)
        self.details["resource_name"] = resource_name


# =============================================================================
# 원격 조회 결과
# =============================================================================


class ResourceNotFoundError(ImporterError):
    """API 호출은 성공했지만 일치하는 리소스가 없음

    리소스가 아직 원격에 존재하지 않으므로 import할 수 없습니다.
    """

    def __init__(self, resource_type: str, name: str, lookup_key: str | None = None):
        message = f"{resource_type} not found {name}"
        if lookup_key and lookup_key != name:
            message = f"{message} (key: {lookup_key})"
        super().__init__(message)
        self.resource_type = resource_type
        self.name = name
        self.lookup_key = lookup_key or name
        self.details.update({"resource_type": resource_type, "name": name, "lookup_key": self.lookup_key})


class APICallError(ImporterError):
    """AWS API 호출 관련 예외

    boto3/botocore의 ClientError, BotoCoreError를 래핑하여 일관된 예외 처리를 제공합니다.
    """

    def __init__(
        self,
        service: str,
        operation: str,
        error_code: str | None = None,
        error_message: str | None = None,
        cause: Exception | None = None,
    ):
        message = f"{service}.{operation}"
        if error_code:
            message = f"{message} 실패 ({error_code})"
        if error_message:
            message = f"{message}: {error_message}"

        super().__init__(message, cause)
        self.service = service
        self.operation = operation
        self.error_code = error_code
        self.error_message = error_message
        self.details.update(
            {
                "service": service,
                "operation": operation,
                "error_code": error_code,
            }
        )

    def __str__(self) -> str:
        return self.message

    @classmethod
    def from_client_error(
        cls,
        service: str,
        operation: str,
        client_error: Exception,
    ) -> APICallError:
        """botocore 예외로부터 생성

        Args:
            service: AWS 서비스 이름
            operation: API 작업 이름
            client_error: ClientError 또는 BotoCoreError 예외

        Returns:
            APICallError 인스턴스
        """
        error_code = None
        error_message = None

        # ClientError 형식 파싱
        if hasattr(client_error, "response"):
            error_info = client_error.response.get("Error", {})
            error_code = error_info.get("Code")
            error_message = error_info.get("Message")
        else:
            # BotoCoreError (연결 실패 등)
            error_code = client_error.__class__.__name__
            error_message = str(client_error)

        return cls(
            service=service,
            operation=operation,
            error_code=error_code,
            error_message=error_message,
            cause=client_error,
        )


class DeadlineExceededError(ImporterError):
    """호출자가 지정한 deadline을 넘김"""

    def __init__(self, operation: str = ""):
        message = "deadline exceeded"
        if operation:
            message = f"{message} [{operation}]"
        super().__init__(message)
        self.operation = operation


# =============================================================================
# 레지스트리 / 플러그인
# =============================================================================


class RegistryError(ImporterError):
    """importer 레지스트리 관련 예외"""


class ImporterNotFoundError(RegistryError):
    """등록되지 않은 importer 이름으로 조회"""

    def __init__(self, name: str):
        super().__init__(f"importer not registered: {name}")
        self.name = name
        self.details["name"] = name


class DuplicateImporterError(RegistryError):
    """같은 이름의 다른 importer가 이미 등록됨"""

    def __init__(self, name: str):
        super().__init__(f"importer name already registered: {name}")
        self.name = name
        self.details["name"] = name


class RegistryFrozenError(RegistryError):
    """부트스트랩이 끝난(frozen) 레지스트리에 등록 시도"""

    def __init__(self, name: str):
        super().__init__(f"registry is frozen, cannot register: {name}")
        self.name = name


class PluginLoadError(ImporterError):
    """플러그인 로드/초기화 실패 예외

    초기화에 실패한 importer는 요청을 처리할 수 없습니다.
    """

    def __init__(
        self,
        plugin_name: str,
        reason: str,
        cause: Exception | None = None,
    ):
        message = f"플러그인 로드 실패 [{plugin_name}]: {reason}"
        super().__init__(message, cause)
        self.plugin_name = plugin_name
        self.reason = reason
        self.details["plugin_name"] = plugin_name


class PluginNotInitializedError(ImporterError):
    """init() 호출 전에 resolve 요청"""

    def __init__(self, plugin_name: str):
        super().__init__(f"importer not initialized: {plugin_name}")
        self.plugin_name = plugin_name


# =============================================================================
# 설정 관련 예외
# =============================================================================


class ConfigError(ImporterError):
    """설정 관련 예외"""

    def __init__(
        self,
        key: str,
        message: str,
        cause: Exception | None = None,
    ):
        full_message = f"설정 오류 [{key}]: {message}"
        super().__init__(full_message, cause)
        self.config_key = key
        self.details["config_key"] = key


# =============================================================================
# 예외 유틸리티 함수
# =============================================================================

_ACCESS_DENIED_CODES = {
    "AccessDenied",
    "AccessDeniedException",
    "UnauthorizedAccess",
    "UnauthorizedOperation",
}

_THROTTLING_CODES = {
    "Throttling",
    "ThrottlingException",
    "RequestLimitExceeded",
    "TooManyRequestsException",
    "RateExceeded",
}

_NOT_FOUND_CODES = {
    "ResourceNotFoundException",
    "NotFoundException",
    "NoSuchEntity",
    "ParameterNotFound",
    "RepositoryNotFoundException",
    "CacheClusterNotFound",
    "DBInstanceNotFound",
    "ClusterNotFoundException",
    "InvalidGroup.NotFound",
}


def _error_code(error: Exception) -> str | None:
    if isinstance(error, APICallError):
        return error.error_code
    if hasattr(error, "response"):
        return error.response.get("Error", {}).get("Code", "")
    return None


def is_access_denied(error: Exception) -> bool:
    """액세스 거부 오류인지 확인

    Args:
        error: 확인할 예외

    Returns:
        액세스 거부 오류이면 True
    """
    return _error_code(error) in _ACCESS_DENIED_CODES


def is_throttling(error: Exception) -> bool:
    """스로틀링 오류인지 확인"""
    return _error_code(error) in _THROTTLING_CODES


def is_not_found(error: Exception) -> bool:
    """리소스를 찾을 수 없는 오류인지 확인

    ResourceNotFoundError는 항상 True, API 에러는 에러 코드로 판단합니다.
    """
    if isinstance(error, ResourceNotFoundError):
        return True
    return _error_code(error) in _NOT_FOUND_CODES


def format_error_for_user(error: Exception) -> str:
    """사용자에게 표시할 에러 메시지 포맷팅

    Args:
        error: 예외

    Returns:
        사용자 친화적인 에러 메시지
    """
    if isinstance(error, APICallError) and error.error_code:
        friendly = _FRIENDLY_MESSAGES.get(error.error_code)
        if friendly:
            return f"{error.service}.{error.operation}: {friendly}"
        return str(error)

    if isinstance(error, ImporterError):
        # 커스텀 예외는 이미 포맷팅됨
        return str(error)

    # boto3 ClientError
    if hasattr(error, "response"):
        error_info = error.response.get("Error", {})
        code = error_info.get("Code", "UnknownError")
        message = error_info.get("Message", str(error))
        return _FRIENDLY_MESSAGES.get(code, f"{code}: {message}")

    return str(error)


_FRIENDLY_MESSAGES = {
    "AccessDenied": "권한이 없습니다. IAM 정책을 확인하세요.",
    "AccessDeniedException": "권한이 없습니다. IAM 정책을 확인하세요.",
    "ExpiredToken": "인증 토큰이 만료되었습니다. 다시 로그인하세요.",
    "InvalidClientTokenId": "잘못된 자격 증명입니다.",
    "Throttling": "요청이 너무 많습니다. 잠시 후 다시 시도하세요.",
}
