"""
Generic extension registry.

An extension is a standalone Python file exporting a fixed set of names (a
function plus a definition object). :class:`ExtensionRegistry` walks a folder
tree, imports every candidate file, lets the concrete registry verify and wrap
the module into an :class:`ExtensionRecord`, and stores the record under a key
derived from its definition.

Folder layout constraint: a directory whose name contains a period is never
descended into. Extension roots must not rely on dot-named sub folders.
"""

from __future__ import annotations

import asyncio
import hashlib
import importlib.util
import os
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from types import ModuleType
from typing import Dict, Generic, Iterator, List, TypeVar

from strawhat.util.logger import get_logger

logger = get_logger("extension_registry")

EXTENSION_SUFFIX = ".py"
SYNTHETIC_PACKAGE = "strawhat_loaded_extensions"


class ExtensionRecord:
    """Base wrapper for a loaded extension module.

    Attributes:
        logger_id: File name of the extension, used as its logger name.
    """

    __slots__ = ("_logger_id",)

    def __init__(self, logger_id: str) -> None:
        self._logger_id = logger_id

    @property
    def logger_id(self) -> str:
        return self._logger_id

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._logger_id!r})"


KeyT = TypeVar("KeyT")
RecordT = TypeVar("RecordT", bound=ExtensionRecord)


def is_extension_file(entry: os.DirEntry) -> bool:
    """Python files that are not private (``__init__.py``, ``_helpers.py``)."""
    return entry.is_file() and entry.name.endswith(EXTENSION_SUFFIX) and not entry.name.startswith("_")


def is_extension_folder(entry: os.DirEntry) -> bool:
    """Sub folders to recurse into. Names containing a period are skipped."""
    return entry.is_dir() and "." not in entry.name and entry.name != "__pycache__"


def module_name_for(path: Path) -> str:
    """Unique module name for an extension file, stable per absolute path."""
    digest = hashlib.sha1(str(path.resolve()).encode("utf-8")).hexdigest()[:10]
    return f"{SYNTHETIC_PACKAGE}.{path.stem}_{digest}"


def import_extension_module(path: Path) -> ModuleType:
    """Import the file at ``path`` as a fresh module.

    The module is registered in ``sys.modules`` while it executes so
    dataclasses and pickling inside the extension resolve their module. It is
    removed again if execution fails.
    """
    name = module_name_for(path)
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot build an import spec for {path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(name, None)
        raise
    return module


class ExtensionRegistry(ABC, Generic[KeyT, RecordT]):
    """Keyed store of extension records populated from a folder tree.

    Concrete registries implement :meth:`verify`, :meth:`generate_record` and
    :meth:`generate_key`, and may override :meth:`on_load` for side effects
    that must happen once a record is stored.

    Loading is sequential: files of a folder in listing order, then its sub
    folders in listing order. When two files resolve to the same key the
    first one loaded wins.
    """

    def __init__(self) -> None:
        self._records: Dict[KeyT, RecordT] = {}

    # --------------------------
    # Hooks
    # --------------------------
    @abstractmethod
    def verify(self, file_name: str, module: ModuleType) -> bool:
        """Return True when ``module`` exports everything the registry needs.

        Implementations log the specific reason on failure and must reject a
        key that is already present.
        """

    @abstractmethod
    def generate_record(self, file_name: str, module: ModuleType) -> RecordT:
        """Wrap a verified module into a record."""

    @abstractmethod
    def generate_key(self, record: RecordT) -> KeyT:
        """Derive the registry key of ``record``."""

    def on_load(self, record: RecordT) -> None:
        """Called after ``record`` has been stored."""

    # --------------------------
    # Loading
    # --------------------------
    async def load_folder(self, folder_path: str | os.PathLike) -> int:
        """Recursively load every extension file below ``folder_path``.

        Errors while listing a folder are logged and skip that folder only.

        Returns:
            int: Number of extensions loaded from the whole tree.
        """
        folder = Path(folder_path)
        try:
            with os.scandir(folder) as iterator:
                entries = sorted(iterator, key=lambda entry: entry.name)
            files = [entry for entry in entries if is_extension_file(entry)]
            folders = [entry for entry in entries if is_extension_folder(entry)]
        except OSError as exc:
            logger.error("Failed to list extension folder %s: %s", folder, exc)
            return 0

        loaded = 0
        if files:
            logger.info("Loading %d files from %s...", len(files), folder.name)
            for entry in files:
                if await self.load_file(entry.path):
                    loaded += 1
            logger.info("Loaded %d files!", loaded)

        for entry in folders:
            loaded += await self.load_folder(entry.path)

        return loaded

    async def load_file(self, file_path: str | os.PathLike) -> bool:
        """Import, verify and store a single extension file.

        Returns:
            bool: True if the extension was stored, False on any failure.
        """
        path = Path(file_path)
        try:
            module = await asyncio.to_thread(import_extension_module, path)
        except Exception as exc:
            logger.error("Failed to import extension %s: %s", path, exc, exc_info=True)
            return False

        file_name = path.name
        if not self.verify(file_name, module):
            return False

        try:
            record = self.generate_record(file_name, module)
            key = self.generate_key(record)
        except Exception as exc:
            logger.error("Failed to build extension %s: %s", file_name, exc, exc_info=True)
            return False

        self._records[key] = record
        try:
            self.on_load(record)
        except Exception as exc:
            del self._records[key]
            logger.error("Failed to attach extension %s: %s", file_name, exc, exc_info=True)
            return False
        logger.debug("Registered %s under %r", file_name, key)
        return True

    # --------------------------
    # Queries
    # --------------------------
    def lookup(self, key: KeyT) -> RecordT | None:
        """Return the record stored under ``key`` or None."""
        try:
            return self._records.get(key)
        except TypeError:
            # unhashable key
            return None

    @property
    def records(self) -> Dict[KeyT, RecordT]:
        """Shallow copy of the keyed mapping, in insertion order."""
        return dict(self._records)

    def keys(self) -> List[KeyT]:
        return list(self._records)

    def __contains__(self, key: object) -> bool:
        return self.lookup(key) is not None  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[RecordT]:
        return iter(list(self._records.values()))
