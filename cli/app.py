"""
cli/app.py - 메인 CLI 엔트리포인트

Click 기반의 CLI 애플리케이션 진입점입니다.
plugins/ 의 importer를 자동 발견해 레지스트리를 만들고, plan의 리소스를 해석합니다.

명령어 구조:
    tpi plan plan.json              # plan의 create 대상 리소스 -> terraform import 명령
    tpi resolve TYPE NAME -a k=v    # 리소스 하나 해석
    tpi list                        # importer / 지원 리소스 타입 목록
    tpi --version

Usage:
    $ terraform plan -out plan.tfplan
    $ terraform show -json plan.tfplan > plan.json
    $ tpi plan plan.json > import.sh

import 명령은 stdout, 진행 상황/요약은 stderr로 출력합니다.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from core.config import LogConfig, get_version, settings
from core.deadline import Deadline
from core.discovery import build_registry
from core.exceptions import ConfigError, ImporterError, format_error_for_user
from core.parallel import ResolutionStatus, parallel_resolve
from core.plan import load_plan, render_import_command

# 진단 출력은 stderr (stdout은 import 명령 전용)
console = Console(stderr=True, soft_wrap=True)

# botocore 노이즈 로그 제한
logging.getLogger("botocore").setLevel(logging.WARNING)

_STATUS_STYLES = {
    ResolutionStatus.EMPTY: "dim",
    ResolutionStatus.SKIPPED: "yellow",
    ResolutionStatus.NOT_FOUND: "dim",
    ResolutionStatus.UNSUPPORTED: "dim",
    ResolutionStatus.NO_IMPORTER: "dim",
    ResolutionStatus.API_ERROR: "red",
    ResolutionStatus.DEADLINE_EXCEEDED: "red",
    ResolutionStatus.ERROR: "red",
}


def _configure_logging(verbose: bool) -> None:
    try:
        config = LogConfig.from_env()
    except ConfigError as e:
        raise click.ClickException(format_error_for_user(e)) from e
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.level,
        format=config.format,
        datefmt=config.date_format,
    )


def _parse_attribute(raw: str) -> tuple[str, object]:
    """key=value 파싱 (value가 JSON이면 디코딩, 아니면 문자열)"""
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise click.BadParameter(f"key=value 형식이어야 합니다: {raw}")
    try:
        return key, json.loads(value)
    except json.JSONDecodeError:
        return key, value


@click.group()
@click.version_option(version=get_version(), prog_name="tpi")
@click.option("-v", "--verbose", is_flag=True, help="DEBUG 로그 출력")
def cli(verbose: bool) -> None:
    """Terraform plan에 선언된 리소스의 import 식별자 해석"""
    _configure_logging(verbose)


@cli.command("plan")
@click.argument("plan_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-w", "--workers", type=click.IntRange(min=1), default=settings.MAX_WORKERS, show_default=True, help="동시 해석 수"
)
@click.option("-t", "--timeout", type=click.FloatRange(min=0, min_open=True), default=None, help="전체 시간 예산 (초)")
@click.option("-p", "--provider", "providers", multiple=True, help="사용할 importer (다중 가능, 기본: 전체)")
def plan_command(plan_file: Path, workers: int, timeout: float | None, providers: tuple[str, ...]) -> None:
    """plan JSON의 create 대상 리소스를 해석해 terraform import 명령 출력

    \b
    PLAN_FILE: `terraform show -json <planfile>` 출력
    """
    try:
        declarations = load_plan(plan_file)
    except ImporterError as e:
        raise click.ClickException(format_error_for_user(e)) from e

    registry = build_registry(only=list(providers) or None)
    if not len(registry):
        raise click.ClickException("사용 가능한 importer가 없습니다")

    result = parallel_resolve(registry, declarations, max_workers=workers, timeout=timeout)

    for outcome in result.resolved:
        click.echo(render_import_command(outcome.declaration, outcome.identifier))

    for outcome in result.outcomes:
        if outcome.resolved:
            continue
        style = _STATUS_STYLES.get(outcome.status, "white")
        console.print(f"[{style}]{escape(str(outcome))}[/{style}]", highlight=False)

    console.print(f"[bold]{result.get_summary()}[/bold]")

    if result.has_failures():
        raise SystemExit(1)


@cli.command("resolve")
@click.argument("resource_type")
@click.argument("name")
@click.option("-a", "--attr", "attrs", multiple=True, help="속성 key=value (다중 가능, value는 JSON 허용)")
@click.option("-p", "--provider", default=None, help="importer 이름 (기본: 리소스 타입 접두어)")
@click.option("-t", "--timeout", type=click.FloatRange(min=0, min_open=True), default=None, help="시간 예산 (초)")
def resolve_command(
    resource_type: str,
    name: str,
    attrs: tuple[str, ...],
    provider: str | None,
    timeout: float | None,
) -> None:
    """리소스 하나의 import 식별자 출력

    \b
    Examples:
        tpi resolve aws_security_group web -a vpc_id=vpc-0abc
        tpi resolve aws_ecs_service api -a cluster=arn:aws:ecs:eu-central-1:123456789012:cluster/prod
    """
    attributes = dict(_parse_attribute(raw) for raw in attrs)
    provider = provider or resource_type.split("_", 1)[0]

    registry = build_registry(only=[provider])
    try:
        importer = registry.lookup(provider)
        deadline = Deadline.after(timeout) if timeout else None
        identifier = importer.get_import_name(resource_type, name, attributes, deadline=deadline)
    except ImporterError as e:
        raise click.ClickException(format_error_for_user(e)) from e

    if not identifier:
        console.print(f"[dim]{escape(resource_type)} {escape(name)}: 식별자 없음[/dim]")
        return

    click.echo(identifier)


@cli.command("list")
def list_command() -> None:
    """등록된 importer와 지원 리소스 타입 목록"""
    registry = build_registry()

    table = Table(title="Importers", show_header=True)
    table.add_column("Importer", style="cyan")
    table.add_column("Resource type", style="white")

    for importer in registry:
        for resource_type in importer.supported_types():
            table.add_row(importer.importer_name(), resource_type)

    console.print(table)


if __name__ == "__main__":
    cli()
