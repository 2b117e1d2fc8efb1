"""
plugins/aws/resolvers.py - 리소스 타입별 import 식별자 resolver

각 resolver는 (session, 선언 이름, 속성 뷰, deadline)을 받아 다음 순서로 동작합니다.
    1. 필수 속성 추출 (없거나 string이 아니면 SkipResourceError, API 호출 전)
    2. 조회 API 1회 (get-by-key 또는 list + filter)
    3. 응답에서 일치 항목 탐색 (첫 번째 일치 사용)
    4. API 성공 + 일치 없음 -> ResourceNotFoundError

API 호출 실패 처리는 resolver마다 다릅니다.
    - 전파 (APICallError): elasticache, security group, rds, appautoscaling, service discovery
    - 무시 후 "" 반환: API_ERROR_SWALLOWING_TYPES
무시하는 쪽은 일시적 장애와 "없음"을 구분하지 못하는 알려진 불일치이며,
호출자가 타입별로 분기하고 있으므로 그대로 유지합니다.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from botocore.exceptions import BotoCoreError, ClientError

from core.exceptions import APICallError, ResourceNotFoundError, is_not_found
from core.parallel.client import get_client

if TYPE_CHECKING:
    from boto3 import Session

    from core.attributes import AttributeView
    from core.deadline import Deadline

logger = logging.getLogger(__name__)

ELASTICACHE_CLUSTER = "aws_elasticache_cluster"
CLOUDWATCH_LOG_GROUP = "aws_cloudwatch_log_group"
ECR_REPOSITORY = "aws_ecr_repository"
SSM_PARAMETER = "aws_ssm_parameter"
SECURITY_GROUP = "aws_security_group"
ECS_SERVICE = "aws_ecs_service"
DB_INSTANCE = "aws_db_instance"
APPAUTOSCALING_POLICY = "aws_appautoscaling_policy"
IAM_ROLE = "aws_iam_role"
SERVICE_DISCOVERY_SERVICE = "aws_service_discovery_service"

# API 실패 시 에러 대신 "" 를 반환하는 타입
API_ERROR_SWALLOWING_TYPES = frozenset(
    {
        CLOUDWATCH_LOG_GROUP,
        ECR_REPOSITORY,
        SSM_PARAMETER,
        ECS_SERVICE,
        IAM_ROLE,
    }
)

_API_ERRORS = (ClientError, BotoCoreError)


def _swallowed(resource_type: str, name: str, error: Exception) -> str:
    if is_not_found(error):
        logger.debug(f"[{resource_type}] {name}: API 오류 무시 ({error})")
    else:
        logger.warning(f"[{resource_type}] {name}: API 오류 무시 ({error})")
    return ""


# =============================================================================
# get-by-key
# =============================================================================


def resolve_elasticache_cluster(
    session: Session,
    name: str,
    attributes: AttributeView,
    deadline: Deadline | None = None,
) -> str:
    """ElastiCache 클러스터 - cluster_id 그대로 반환"""
    cluster_id = attributes.require_string("cluster_id", name, label="cluster id")

    elasticache = get_client(session, "elasticache", deadline=deadline)
    try:
        output = elasticache.describe_cache_clusters(CacheClusterId=cluster_id)
    except _API_ERRORS as e:
        raise APICallError.from_client_error("elasticache", "describe_cache_clusters", e) from e

    for cluster in output.get("CacheClusters", []):
        if cluster.get("CacheClusterId") == cluster_id:
            return cluster_id

    raise ResourceNotFoundError(ELASTICACHE_CLUSTER, name, lookup_key=cluster_id)


def resolve_ecr_repository(
    session: Session,
    name: str,
    attributes: AttributeView,
    deadline: Deadline | None = None,
) -> str:
    """ECR 리포지토리 - 이름 그대로 반환 (API 오류 무시)"""
    ecr = get_client(session, "ecr", deadline=deadline)
    try:
        output = ecr.describe_repositories(repositoryNames=[name])
    except _API_ERRORS as e:
        return _swallowed(ECR_REPOSITORY, name, e)

    for repository in output.get("repositories", []):
        if repository.get("repositoryName") == name:
            return name

    raise ResourceNotFoundError(ECR_REPOSITORY, name)


def resolve_ssm_parameter(
    session: Session,
    name: str,
    attributes: AttributeView,
    deadline: Deadline | None = None,
) -> str:
    """SSM 파라미터 - 조회 성공 자체가 존재 확인 (API 오류 무시)"""
    ssm = get_client(session, "ssm", deadline=deadline)
    try:
        output = ssm.get_parameter(Name=name)
    except _API_ERRORS as e:
        return _swallowed(SSM_PARAMETER, name, e)

    return output["Parameter"]["Name"]


def resolve_ecs_service(
    session: Session,
    name: str,
    attributes: AttributeView,
    deadline: Deadline | None = None,
) -> str:
    """ECS 서비스 - "<클러스터 이름>/<서비스 이름>" 반환 (API 오류 무시)

    cluster 속성은 ARN 또는 이름이며, 마지막 "/" 이후 부분을 클러스터 이름으로 씁니다.
    """
    cluster = attributes.require_string("cluster", name, label="cluster")

    ecs = get_client(session, "ecs", deadline=deadline)
    try:
        output = ecs.describe_services(cluster=cluster, services=[name])
    except _API_ERRORS as e:
        return _swallowed(ECS_SERVICE, name, e)

    cluster_name = cluster.split("/")[-1]
    for service in output.get("services", []):
        if service.get("serviceName") == name:
            return f"{cluster_name}/{name}"

    raise ResourceNotFoundError(ECS_SERVICE, name)


def resolve_db_instance(
    session: Session,
    name: str,
    attributes: AttributeView,
    deadline: Deadline | None = None,
) -> str:
    """RDS 인스턴스 - identifier 그대로 반환"""
    identifier = attributes.require_string("identifier", name, label="identifier")

    rds = get_client(session, "rds", deadline=deadline)
    try:
        output = rds.describe_db_instances(DBInstanceIdentifier=identifier)
    except _API_ERRORS as e:
        raise APICallError.from_client_error("rds", "describe_db_instances", e) from e

    for instance in output.get("DBInstances", []):
        if instance.get("DBInstanceIdentifier") == identifier:
            return identifier

    raise ResourceNotFoundError(DB_INSTANCE, name, lookup_key=identifier)


def resolve_iam_role(
    session: Session,
    name: str,
    attributes: AttributeView,
    deadline: Deadline | None = None,
) -> str:
    """IAM Role - 조회 성공 시 이름 반환, 실패 시 "" (에러 없음)"""
    iam = get_client(session, "iam", deadline=deadline)
    try:
        iam.get_role(RoleName=name)
    except _API_ERRORS as e:
        return _swallowed(IAM_ROLE, name, e)

    return name


# =============================================================================
# list + filter
# =============================================================================


def resolve_cloudwatch_log_group(
    session: Session,
    name: str,
    attributes: AttributeView,
    deadline: Deadline | None = None,
) -> str:
    """CloudWatch 로그 그룹 - 이름 prefix 조회 후 정확히 일치 (API 오류 무시)"""
    logs = get_client(session, "logs", deadline=deadline)
    try:
        paginator = logs.get_paginator("describe_log_groups")
        for page in paginator.paginate(logGroupNamePrefix=name):
            for group in page.get("logGroups", []):
                if group.get("logGroupName") == name:
                    return name
            if deadline is not None:
                deadline.check("logs.describe_log_groups")
    except _API_ERRORS as e:
        return _swallowed(CLOUDWATCH_LOG_GROUP, name, e)

    raise ResourceNotFoundError(CLOUDWATCH_LOG_GROUP, name)


def resolve_security_group(
    session: Session,
    name: str,
    attributes: AttributeView,
    deadline: Deadline | None = None,
) -> str:
    """Security Group - vpc-id + group-name 필터 조회, GroupId 반환"""
    vpc_id = attributes.require_string("vpc_id", name, label="vpc id")

    ec2 = get_client(session, "ec2", deadline=deadline)
    filters = [
        {"Name": "vpc-id", "Values": [vpc_id]},
        {"Name": "group-name", "Values": [name]},
    ]
    try:
        paginator = ec2.get_paginator("describe_security_groups")
        for page in paginator.paginate(Filters=filters):
            for group in page.get("SecurityGroups", []):
                if group.get("GroupName") == name:
                    return group["GroupId"]
            if deadline is not None:
                deadline.check("ec2.describe_security_groups")
    except _API_ERRORS as e:
        raise APICallError.from_client_error("ec2", "describe_security_groups", e) from e

    raise ResourceNotFoundError(SECURITY_GROUP, name)


def resolve_appautoscaling_policy(
    session: Session,
    name: str,
    attributes: AttributeView,
    deadline: Deadline | None = None,
) -> str:
    """Application Auto Scaling 정책 - 이름 반환

    서비스 namespace는 identifier 속성에서 읽습니다.
    """
    namespace = attributes.require_string("identifier", name, label="service namespace")

    autoscaling = get_client(session, "application-autoscaling", deadline=deadline)
    try:
        paginator = autoscaling.get_paginator("describe_scaling_policies")
        for page in paginator.paginate(PolicyNames=[name], ServiceNamespace=namespace):
            for policy in page.get("ScalingPolicies", []):
                if policy.get("PolicyName") == name:
                    return name
            if deadline is not None:
                deadline.check("application-autoscaling.describe_scaling_policies")
    except _API_ERRORS as e:
        raise APICallError.from_client_error("application-autoscaling", "describe_scaling_policies", e) from e

    raise ResourceNotFoundError(APPAUTOSCALING_POLICY, name)


def resolve_service_discovery_service(
    session: Session,
    name: str,
    attributes: AttributeView,
    deadline: Deadline | None = None,
) -> str:
    """Cloud Map 서비스 - 전체 목록에서 이름 일치 항목의 Id 반환"""
    servicediscovery = get_client(session, "servicediscovery", deadline=deadline)
    try:
        paginator = servicediscovery.get_paginator("list_services")
        for page in paginator.paginate():
            for service in page.get("Services", []):
                if service.get("Name") == name:
                    return service["Id"]
            if deadline is not None:
                deadline.check("servicediscovery.list_services")
    except _API_ERRORS as e:
        raise APICallError.from_client_error("servicediscovery", "list_services", e) from e

    raise ResourceNotFoundError(SERVICE_DISCOVERY_SERVICE, name)


RESOLVERS = {
    ELASTICACHE_CLUSTER: resolve_elasticache_cluster,
    CLOUDWATCH_LOG_GROUP: resolve_cloudwatch_log_group,
    ECR_REPOSITORY: resolve_ecr_repository,
    SSM_PARAMETER: resolve_ssm_parameter,
    SECURITY_GROUP: resolve_security_group,
    ECS_SERVICE: resolve_ecs_service,
    DB_INSTANCE: resolve_db_instance,
    APPAUTOSCALING_POLICY: resolve_appautoscaling_policy,
    IAM_ROLE: resolve_iam_role,
    SERVICE_DISCOVERY_SERVICE: resolve_service_discovery_service,
}
