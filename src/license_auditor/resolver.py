"""Locate installed dependencies in nested installation directories."""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from .config import DEFAULT_INSTALL_DIR_NAME, DEFAULT_MANIFEST_NAME
from .exceptions import DependencyNotFound

logger = logging.getLogger(__name__)


class DependencyResolver:
    """Resolves a dependency name the way nested installations shadow each other.

    Starting from a package directory, ``<dir>/<install_dir>/<name>`` is
    checked first. Failing that, the search moves to the directory
    enclosing the innermost ``<install_dir>`` segment of ``<dir>`` and
    tries again, until no such segment is left.
    """

    def __init__(self, install_dir_name: str = DEFAULT_INSTALL_DIR_NAME,
                 manifest_name: str = DEFAULT_MANIFEST_NAME):
        self.install_dir_name = install_dir_name
        self.manifest_name = manifest_name

    def candidates(self, name: str, start_dir: Path) -> List[Path]:
        """Return every package directory tried for ``name``, innermost first."""
        paths = []
        cursor: Optional[Path] = Path(start_dir)
        while cursor is not None:
            paths.append(cursor / self.install_dir_name / name)
            parent = self._enclosing_dir(cursor)
            if parent is None or parent == cursor:
                break
            cursor = parent
        return paths

    def search(self, name: str, start_dir: Path) -> Tuple[Optional[Path], List[str]]:
        """Find the installed directory of ``name``.

        Returns the directory (or ``None``) and the manifest paths tried.
        """
        searched = []
        for candidate in self.candidates(name, start_dir):
            manifest = candidate / self.manifest_name
            searched.append(str(manifest))
            if manifest.is_file():
                logger.debug("Resolved %s from %s to %s", name, start_dir, candidate)
                return candidate, searched
        return None, searched

    def resolve(self, name: str, start_dir: Path, parent: Optional[str] = None) -> Path:
        """Like :meth:`search` but raise :class:`DependencyNotFound` on failure."""
        directory, searched = self.search(name, start_dir)
        if directory is None:
            raise DependencyNotFound(name, searched, parent=parent)
        return directory

    def _enclosing_dir(self, directory: Path) -> Optional[Path]:
        parts = directory.parts
        for index in range(len(parts) - 1, -1, -1):
            if parts[index] == self.install_dir_name:
                return Path(*parts[:index]) if index > 0 else Path(".")
        return None
