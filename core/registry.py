"""
core/registry.py - Importer 레지스트리

프로세스 시작 시 한 번 만들어 필요한 곳에 참조로 전달하는 명시적 레지스트리입니다.
등록 순서를 유지하는 append-only 리스트이며, 등록과 조회 모두 같은 lock을
사용하므로 부트스트랩 중 동시 등록/조회도 안전합니다.
레지스트리 크기가 한 자릿수이므로 조회는 선형 탐색합니다.

Example:
    registry = ImporterRegistry()
    registry.register(aws_importer)
    registry.freeze()

    importer = registry.lookup("aws")
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator

from core.exceptions import (
    DuplicateImporterError,
    ImporterNotFoundError,
    RegistryError,
    RegistryFrozenError,
)
from core.importer import Importer

logger = logging.getLogger(__name__)


class ImporterRegistry:
    """스레드 세이프 Importer 레지스트리"""

    def __init__(self) -> None:
        self._importers: list[Importer] = []
        self._lock = threading.Lock()
        self._frozen = False

    def register(self, importer: Importer) -> None:
        """importer 추가

        같은 인스턴스를 두 번 등록하면 중복 제거 없이 두 번 추가됩니다.

        Raises:
            RegistryError: 이름이 비어 있음
            DuplicateImporterError: 같은 이름의 다른 importer가 이미 있음
            RegistryFrozenError: freeze() 이후 등록
        """
        name = importer.importer_name()
        if not name:
            raise RegistryError(f"importer name must not be empty: {importer!r}")

        with self._lock:
            if self._frozen:
                raise RegistryFrozenError(name)
            for existing in self._importers:
                if existing.importer_name() == name and existing is not importer:
                    raise DuplicateImporterError(name)
            self._importers.append(importer)

        logger.debug(f"importer 등록: {name}")

    def lookup(self, name: str) -> Importer:
        """이름으로 조회

        Raises:
            ImporterNotFoundError: 등록되지 않은 이름
        """
        importer = self.get(name)
        if importer is None:
            raise ImporterNotFoundError(name)
        return importer

    def get(self, name: str) -> Importer | None:
        """이름으로 조회 (없으면 None)"""
        with self._lock:
            for importer in self._importers:
                if importer.importer_name() == name:
                    return importer
        return None

    def freeze(self) -> None:
        """부트스트랩 종료 - 이후 등록은 RegistryFrozenError"""
        with self._lock:
            self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def names(self) -> list[str]:
        with self._lock:
            return [importer.importer_name() for importer in self._importers]

    def __iter__(self) -> Iterator[Importer]:
        with self._lock:
            snapshot = list(self._importers)
        return iter(snapshot)

    def __len__(self) -> int:
        with self._lock:
            return len(self._importers)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None
