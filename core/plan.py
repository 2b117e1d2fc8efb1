"""
core/plan.py - Terraform plan JSON -> ResourceDeclaration

`terraform show -json <planfile>` 출력에서 새로 생성될(create) managed 리소스를
ResourceDeclaration 레코드로 변환하고, 해석된 식별자로 import 명령을 만듭니다.

Example:
    declarations = load_plan(Path("plan.json"))
    for decl in declarations:
        ...
    render_import_command(decl, "sg-0123")  # terraform import aws_security_group.web sg-0123
"""

from __future__ import annotations

import json
import logging
import shlex
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from core.attributes import AttributeView
from core.exceptions import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceDeclaration:
    """IaC에 선언된 리소스 하나

    Attributes:
        resource_type: 리소스 타입 (예: "aws_iam_role")
        name: 원격에서 쓰이는 리소스 이름 (name 속성, 없으면 리소스 라벨)
        attributes: 선언된 설정값
        provider: 라우팅할 importer 이름 (예: "aws")
        address: Terraform 리소스 주소 (예: "module.app.aws_iam_role.this")
    """

    resource_type: str
    name: str
    attributes: AttributeView = field(default_factory=AttributeView)
    provider: str = ""
    address: str = ""


def provider_short_name(provider_name: str) -> str:
    """provider 주소의 마지막 부분 (registry.terraform.io/hashicorp/aws -> aws)"""
    return provider_name.rstrip("/").split("/")[-1]


def _unknown_keys(after_unknown: Any) -> list[str]:
    # after_unknown 최상위에서 true 인 키만 (중첩된 부분 unknown 은 값 자체가 있음)
    if not isinstance(after_unknown, Mapping):
        return []
    return [key for key, value in after_unknown.items() if value is True]


def iter_declarations(plan: Mapping[str, Any]) -> Iterator[ResourceDeclaration]:
    """plan 딕셔너리에서 create 대상 managed 리소스를 순회"""
    for change in plan.get("resource_changes", []):
        if change.get("mode") != "managed":
            continue

        actions = change.get("change", {}).get("actions", [])
        if actions != ["create"]:
            continue

        after = change["change"].get("after") or {}
        attributes = AttributeView.from_mapping(after, unknown=_unknown_keys(change["change"].get("after_unknown")))

        declared_name = attributes["name"]
        name = declared_name.raw if declared_name.is_string else change.get("name", "")

        yield ResourceDeclaration(
            resource_type=change.get("type", ""),
            name=name,
            attributes=attributes,
            provider=provider_short_name(change.get("provider_name", "")),
            address=change.get("address", ""),
        )


def load_plan(path: Path) -> list[ResourceDeclaration]:
    """plan JSON 파일 로드

    Raises:
        ValidationError: JSON이 아니거나 plan 형식이 아님
    """
    try:
        plan = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValidationError(field=str(path), value="invalid JSON", expected="terraform plan JSON", cause=e) from e

    if not isinstance(plan, dict) or "resource_changes" not in plan:
        raise ValidationError(field=str(path), value="resource_changes 없음", expected="terraform plan JSON")

    declarations = list(iter_declarations(plan))
    logger.info(f"plan 로드: {path} (create 대상 {len(declarations)}개)")
    return declarations


def render_import_command(declaration: ResourceDeclaration, identifier: str) -> str:
    """terraform import 명령 문자열"""
    return f"terraform import {shlex.quote(declaration.address)} {shlex.quote(identifier)}"
