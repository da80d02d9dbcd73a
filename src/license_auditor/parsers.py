"""
Manifest parsing.

Reads a single package manifest (``package.json`` by default) and
normalizes its loosely typed fields into a :class:`ManifestRecord`:

- ``author`` as a ``"NAME <EMAIL> (URL)"`` string or a ``{name, email, url}`` object
- ``license``/``licenses`` as a string, a list, a ``{type, url|path}`` object
  or a list of such objects
- ``repository`` as a string or a ``{url}`` object
- ``dependencies``/``devDependencies`` as name to version-range maps

License files are not declared in the manifest; they are discovered by
file name next to it.
"""

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, List, Optional, Tuple

from .config import DEFAULT_MANIFEST_NAME
from .exceptions import MalformedManifest, ManifestNotFound
from .models import DependencyInfo, ManifestRecord, Package

logger = logging.getLogger(__name__)

LICENSE_FILE_PATTERN = re.compile(r"^(license|licence|copying|ofl|patents)", re.IGNORECASE)
AUTHOR_PATTERN = re.compile(r"^([^<(]+?)?\s*(?:<([^>(]+?)>)?\s*(?:\(([^)]+?)\)|$)")
LICENSE_KEYS = ("license", "licence", "licenses", "licences")


def find_license_files(directory: Path) -> List[Path]:
    """Find license text files in ``directory``.

    Entries whose name starts with license, licence, copying, ofl or
    patents (any case) are returned. A matching subdirectory contributes
    all of its direct entries instead of itself.
    """
    found = []
    try:
        entries = sorted(os.listdir(directory))
    except OSError as e:
        logger.debug("Cannot list %s: %s", directory, e)
        return found

    for entry in entries:
        if not LICENSE_FILE_PATTERN.match(entry):
            continue
        path = Path(directory) / entry
        if path.is_dir():
            try:
                found.extend(path / name for name in sorted(os.listdir(path)))
            except OSError as e:
                logger.debug("Cannot list %s: %s", path, e)
            continue
        found.append(path)
    return found


def parse_author(author: Any) -> Tuple[Optional[str], Optional[str], Optional[str]]:
    """Return ``(name, email, url)`` from a manifest ``author`` field."""
    if author is None:
        return None, None, None

    if isinstance(author, str):
        match = AUTHOR_PATTERN.match(author.strip())
        if not match:
            return None, None, None
        name, email, url = match.groups()
        return name or None, email or None, url or None

    if isinstance(author, dict):
        return (
            str(author["name"]) if author.get("name") else None,
            str(author["email"]) if author.get("email") else None,
            str(author["url"]) if author.get("url") else None,
        )

    return None, None, None


def parse_licenses(value: Any) -> Tuple[List[str], List[str]]:
    """Flatten a manifest license declaration.

    Returns the ordered license identifiers and any ``path``/``url``
    references carried by object forms.
    """
    licenses: List[str] = []
    references: List[str] = []

    def read(obj):
        if obj is None:
            return
        if isinstance(obj, str):
            if obj:
                licenses.append(obj)
            return
        if isinstance(obj, list):
            for item in obj:
                read(item)
            return
        if isinstance(obj, dict):
            license_type = obj.get("type")
            if isinstance(license_type, str) and license_type:
                licenses.append(license_type)
            if obj.get("path"):
                references.append(str(obj["path"]))
            elif obj.get("url"):
                references.append(str(obj["url"]))

    read(value)
    return licenses, references


def parse_repository(repository: Any) -> Optional[str]:
    if isinstance(repository, str):
        return repository or None
    if isinstance(repository, dict) and repository.get("url"):
        return str(repository["url"])
    return None


def _parse_dependency_map(data: dict, key: str, dep_type: str, warnings: List[str]) -> List[DependencyInfo]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, dict):
        warnings.append(f"{key} is not an object and was ignored")
        return []
    return [
        DependencyInfo(str(name).strip(), spec.strip() if isinstance(spec, str) else "", dep_type)
        for name, spec in value.items()
    ]


class ManifestParser:
    """Reads package manifests relative to an audited project root."""

    def __init__(self, project_root: Path, manifest_name: str = DEFAULT_MANIFEST_NAME,
                 absolute_license_file_paths: bool = False):
        self.project_root = Path(project_root)
        self.manifest_name = manifest_name
        self.absolute_license_file_paths = absolute_license_file_paths

    def manifest_path(self, directory: Path) -> Path:
        return Path(directory) / self.manifest_name

    def load(self, directory: Path) -> dict:
        """Load the raw manifest JSON object from ``directory``."""
        path = self.manifest_path(directory)
        if not path.is_file():
            raise ManifestNotFound(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, ValueError) as e:
            raise MalformedManifest(path, str(e))
        if not isinstance(data, dict):
            raise MalformedManifest(path, "top-level value is not an object")
        return data

    def read(self, directory: Path) -> ManifestRecord:
        """Read and normalize the manifest in ``directory``.

        Raises:
            ManifestNotFound: No manifest file in ``directory``.
            MalformedManifest: The file is unreadable or not a JSON object.
        """
        directory = Path(directory)
        data = self.load(directory)
        warnings: List[str] = []

        package = Package(
            name=str(data.get("name") or ""),
            version=str(data.get("version") or ""),
            path=str(directory),
            private=data.get("private") is True,
        )

        declared = next((data[key] for key in LICENSE_KEYS if data.get(key)), None)
        package.licenses, references = parse_licenses(declared)

        license_files = [self._report_path(p) for p in find_license_files(directory)]
        if not license_files:
            license_files = references
        if license_files:
            package.license_file = license_files

        package.repository = parse_repository(data.get("repository"))
        package.publisher, package.email, package.url = parse_author(data.get("author"))

        logger.debug("Read manifest %s (%s@%s)", self.manifest_path(directory), package.name, package.version)
        return ManifestRecord(
            package=package,
            dependencies=_parse_dependency_map(data, "dependencies", "runtime", warnings),
            dev_dependencies=_parse_dependency_map(data, "devDependencies", "dev", warnings),
            warnings=warnings,
        )

    def _report_path(self, path: Path) -> str:
        if self.absolute_license_file_paths:
            return str(path)
        try:
            return path.relative_to(self.project_root).as_posix()
        except ValueError:
            return str(path)
