"""Catalog storage interface and implementations.

Defines the contract for loading and writing back locale catalogs, with a
JSON store (one <code>/translation.json per language) and a YAML store
(one <code>.yml per language). Writes are atomic: the new content goes to
a temporary file in the same directory which then replaces the target.
"""

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

import structlog
from infrastructure.i18n.catalog import CatalogTree
from infrastructure.i18n.errors import CatalogLockError, CatalogParseError, CatalogWriteError

logger = structlog.get_logger().bind(component="i18n.loader")

LOCK_FILE_NAME = ".catalog.lock"


class CatalogStore(ABC):
    """Abstract base for catalog stores.

    Implementations define where the resource of a language lives and how
    it is parsed and serialized.

    Attributes:
        catalog_dir: Root directory of the catalogs.
    """

    def __init__(self, catalog_dir: Path):
        self.catalog_dir = Path(catalog_dir)

    @abstractmethod
    def path_for(self, language: str) -> Path:
        """Resource path of a language's catalog."""
        pass

    @abstractmethod
    def _parse(self, text: str) -> Any:
        pass

    @abstractmethod
    def _dump(self, data: Dict[str, Any]) -> str:
        pass

    def exists(self, language: str) -> bool:
        return self.path_for(language).is_file()

    def load(self, language: str) -> CatalogTree:
        """Load the catalog of a language.

        A language without a resource yet loads as an empty catalog.

        Args:
            language: Language code.

        Returns:
            CatalogTree of the language.

        Raises:
            CatalogParseError: If the resource is malformed or its root is
                not a mapping.
        """
        path = self.path_for(language)
        if not path.is_file():
            logger.info("catalog_not_found", language=language, path=str(path))
            return CatalogTree(language=language)

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = self._parse(f.read())
        except (OSError, UnicodeDecodeError, ValueError, yaml.YAMLError) as e:
            logger.error("catalog_parse_failed", language=language, path=str(path), error=str(e))
            raise CatalogParseError(language, path, str(e)) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise CatalogParseError(
                language, path, f"expected a mapping at the root, got {type(data).__name__}"
            )

        tree = CatalogTree(data, language=language)
        logger.info("catalog_loaded", language=language, path=str(path), key_count=len(tree))
        return tree

    def save(self, tree: CatalogTree, language: Optional[str] = None) -> Path:
        """Atomically write a catalog back to its resource.

        Args:
            tree: Catalog to write.
            language: Language code; defaults to tree.language.

        Returns:
            The resource path.

        Raises:
            CatalogWriteError: If the resource cannot be written.
        """
        language = language or tree.language
        if not language:
            raise ValueError("Cannot save a catalog without a language")

        path = self.path_for(language)
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            content = self._dump(tree.to_dict())
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(content)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            _discard(tmp_name)
            logger.error("catalog_write_failed", language=language, path=str(path), error=str(e))
            raise CatalogWriteError(language, path, str(e)) from e
        except BaseException:
            _discard(tmp_name)
            raise

        logger.info("catalog_saved", language=language, path=str(path), key_count=len(tree))
        return path

    def lock(self) -> "CatalogLock":
        return CatalogLock(self.catalog_dir / LOCK_FILE_NAME)


class JSONCatalogStore(CatalogStore):
    """Store for <catalog_dir>/<code>/translation.json resources."""

    FILE_NAME = "translation.json"

    def path_for(self, language: str) -> Path:
        return self.catalog_dir / language / self.FILE_NAME

    def _parse(self, text: str) -> Any:
        if not text.strip():
            return {}
        return json.loads(text)

    def _dump(self, data: Dict[str, Any]) -> str:
        return json.dumps(data, ensure_ascii=False, indent=2) + "\n"


class YAMLCatalogStore(CatalogStore):
    """Store for <catalog_dir>/<code>.yml resources."""

    def path_for(self, language: str) -> Path:
        return self.catalog_dir / f"{language}.yml"

    def _parse(self, text: str) -> Any:
        return yaml.safe_load(text)

    def _dump(self, data: Dict[str, Any]) -> str:
        return yaml.safe_dump(data, allow_unicode=True, sort_keys=False, default_flow_style=False)


class CatalogLock:
    """Exclusive lock serializing catalog writers.

    The lock is a file created with O_CREAT | O_EXCL and removed on release.

    Usage:
        with store.lock():
            store.save(tree)
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._fd: Optional[int] = None

    def acquire(self) -> None:
        """Take the lock.

        Raises:
            CatalogLockError: If another run holds the lock.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._fd = os.open(str(self.path), os.O_CREAT | os.O_EXCL | os.O_WRONLY)
        except FileExistsError as e:
            raise CatalogLockError(f"Catalog lock is held: {self.path}") from e
        os.write(self._fd, str(os.getpid()).encode())
        logger.debug("catalog_lock_acquired", path=str(self.path))

    def release(self) -> None:
        if self._fd is None:
            return
        os.close(self._fd)
        self._fd = None
        try:
            os.unlink(self.path)
        except FileNotFoundError:
            logger.warning("catalog_lock_already_removed", path=str(self.path))
        logger.debug("catalog_lock_released", path=str(self.path))

    @property
    def held(self) -> bool:
        return self._fd is not None

    def __enter__(self) -> "CatalogLock":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


def _discard(tmp_name: Optional[str]) -> None:
    if tmp_name and os.path.exists(tmp_name):
        os.unlink(tmp_name)
