"""
core/discovery.py - Importer 플러그인 자동 발견

plugins/ 하위 패키지 중 IMPORTER 메타데이터를 가진 패키지를 찾아
Importer 인스턴스를 만들고, 초기화한 뒤 레지스트리에 등록합니다.

플러그인 패키지 규약 (plugins/<name>/__init__.py):
    IMPORTER = {
        "name": "aws",
        "description": "AWS import 식별자 해석",
        "module": "importer",       # plugins/<name>/importer.py
        "class": "AwsImporter",
    }

Example:
    from core.discovery import build_registry

    registry = build_registry()
    importer = registry.lookup("aws")
"""

from __future__ import annotations

import importlib
import logging
import pkgutil
from typing import Any

from core.exceptions import PluginLoadError
from core.importer import Importer
from core.registry import ImporterRegistry

logger = logging.getLogger(__name__)

PLUGINS_PACKAGE = "plugins"
IMPORTER_REQUIRED_FIELDS = ("name", "module", "class")


def validate_importer_metadata(meta: dict[str, Any]) -> list[str]:
    """IMPORTER 메타데이터 검증

    Returns:
        에러 메시지 목록 (비어 있으면 유효)
    """
    errors = []
    for key in IMPORTER_REQUIRED_FIELDS:
        if key not in meta:
            errors.append(f"필수 필드 누락: {key}")
        elif not isinstance(meta[key], str) or not meta[key]:
            errors.append(f"필수 필드가 비어있음: {key}")
    return errors


def discover_importers(package: str = PLUGINS_PACKAGE) -> list[dict[str, Any]]:
    """plugins 패키지에서 IMPORTER 메타데이터 수집

    Returns:
        메타데이터 목록 (module_path 필드 추가됨)
    """
    root = importlib.import_module(package)
    found: list[dict[str, Any]] = []

    for module_info in pkgutil.iter_modules(root.__path__):
        if not module_info.ispkg or module_info.name.startswith("_"):
            continue

        module_path = f"{package}.{module_info.name}"
        try:
            module = importlib.import_module(module_path)
        except ImportError as e:
            logger.warning(f"플러그인 import 실패 [{module_path}]: {e}")
            continue

        meta = getattr(module, "IMPORTER", None)
        if not isinstance(meta, dict):
            continue

        errors = validate_importer_metadata(meta)
        if errors:
            logger.warning(f"메타데이터 검증 실패 [{module_path}]: {', '.join(errors)}")
            continue

        found.append({**meta, "module_path": module_path})

    return found


def load_importer(meta: dict[str, Any]) -> Importer:
    """메타데이터로부터 Importer 인스턴스 생성 (init 호출 전)

    Raises:
        PluginLoadError: 모듈/클래스를 찾을 수 없거나 Importer가 아님
    """
    target = f"{meta['module_path']}.{meta['module']}"
    try:
        module = importlib.import_module(target)
    except ImportError as e:
        raise PluginLoadError(meta["name"], f"모듈 로드 실패: {target}", cause=e) from e

    cls = getattr(module, meta["class"], None)
    if not (isinstance(cls, type) and issubclass(cls, Importer)):
        raise PluginLoadError(meta["name"], f"Importer 클래스가 아님: {meta['class']}")

    return cls()


def build_registry(
    only: list[str] | None = None,
    package: str = PLUGINS_PACKAGE,
) -> ImporterRegistry:
    """플러그인을 발견, 초기화, 등록한 레지스트리 생성

    초기화에 실패한 플러그인은 에러 로그를 남기고 등록하지 않습니다.
    반환되는 레지스트리는 freeze 상태입니다.

    Args:
        only: 지정 시 이 이름의 플러그인만 로드
        package: 플러그인 루트 패키지
    """
    registry = ImporterRegistry()

    for meta in discover_importers(package):
        if only is not None and meta["name"] not in only:
            continue
        try:
            importer = load_importer(meta)
            importer.init()
        except PluginLoadError as e:
            logger.error(str(e))
            continue
        registry.register(importer)

    registry.freeze()
    logger.info(f"importer {len(registry)}개 등록: {', '.join(registry.names())}")
    return registry
