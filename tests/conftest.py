import json
from pathlib import Path

import pytest


def write_manifest(directory: Path, **fields) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "package.json"
    path.write_text(json.dumps(fields), encoding="utf-8")
    return path


@pytest.fixture
def project(tmp_path):
    """Factory building a fake project tree under ``tmp_path/project``.

    ``project.root(**fields)`` writes the root manifest and
    ``project.install(dirname, under=None, **fields)`` installs a package in
    ``node_modules``, optionally nested under another installed package.
    """

    class Project:
        def __init__(self, path: Path):
            self.path = path

        def root(self, **fields) -> Path:
            fields.setdefault("name", "app")
            fields.setdefault("version", "1.0.0")
            write_manifest(self.path, **fields)
            return self.path

        def install(self, dirname: str, under: Path = None, **fields) -> Path:
            fields.setdefault("name", dirname)
            fields.setdefault("version", "1.0.0")
            fields.setdefault("license", "MIT")
            directory = (under or self.path) / "node_modules" / dirname
            write_manifest(directory, **fields)
            return directory

    return Project(tmp_path.resolve() / "project")
