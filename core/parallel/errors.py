"""
core/parallel/errors.py - API 에러 분류

APICallError / botocore 예외를 ErrorCategory로 분류합니다.
"""

from __future__ import annotations

from botocore.exceptions import ConnectTimeoutError, EndpointConnectionError, ReadTimeoutError

from core.exceptions import APICallError, is_access_denied, is_not_found, is_throttling

from .types import ErrorCategory


def categorize_error_code(error_code: str) -> ErrorCategory:
    """에러 코드 문자열을 기반으로 ErrorCategory 분류

    Args:
        error_code: AWS 에러 코드 문자열 (예: "AccessDenied", "ThrottlingException")

    Returns:
        분류된 에러 카테고리. 매칭되는 키워드가 없으면 UNKNOWN 반환.
    """
    code = error_code.lower()

    if any(x in code for x in ["accessdenied", "unauthorized", "forbidden"]):
        return ErrorCategory.ACCESS_DENIED
    if any(x in code for x in ["notfound", "nosuch", "doesnotexist"]):
        return ErrorCategory.NOT_FOUND
    if any(x in code for x in ["throttl", "ratelimit", "toomanyrequests"]):
        return ErrorCategory.THROTTLING
    if any(x in code for x in ["timeout", "timedout"]):
        return ErrorCategory.TIMEOUT
    if "expiredtoken" in code:
        return ErrorCategory.EXPIRED_TOKEN
    if any(x in code for x in ["invalid", "validation", "malformed"]):
        return ErrorCategory.INVALID_REQUEST
    if any(x in code for x in ["internal", "serviceunavailable", "serviceerror"]):
        return ErrorCategory.SERVICE_ERROR

    return ErrorCategory.UNKNOWN


def categorize_error(error: Exception) -> ErrorCategory:
    """예외 객체를 분석하여 ErrorCategory로 분류

    APICallError는 원인 예외 타입(연결/타임아웃)을 먼저 보고, 그다음 에러 코드로 분류합니다.
    """
    if is_throttling(error):
        return ErrorCategory.THROTTLING
    if is_access_denied(error):
        return ErrorCategory.ACCESS_DENIED
    if is_not_found(error):
        return ErrorCategory.NOT_FOUND

    cause = error.cause if isinstance(error, APICallError) else error
    if isinstance(cause, (ConnectTimeoutError, ReadTimeoutError)):
        return ErrorCategory.TIMEOUT
    if isinstance(cause, EndpointConnectionError):
        return ErrorCategory.NETWORK

    if isinstance(error, APICallError) and error.error_code:
        return categorize_error_code(error.error_code)

    response = getattr(error, "response", None)
    if response is not None:
        return categorize_error_code(response.get("Error", {}).get("Code", ""))

    if isinstance(error, (ConnectionError, TimeoutError)):
        return ErrorCategory.NETWORK

    return ErrorCategory.UNKNOWN
