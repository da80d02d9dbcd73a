"""Exceptions raised while collecting and auditing a dependency tree."""

from typing import List, Optional


class LicenseAuditorError(Exception):
    """Base class for all license auditor errors."""

    kind = "error"

    def __init__(self, message: str, package: Optional[str] = None, parent: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.package = package
        self.parent = parent


class ManifestNotFound(LicenseAuditorError):
    """No manifest file exists in the given directory."""

    kind = "manifest-not-found"

    def __init__(self, path, package: Optional[str] = None, parent: Optional[str] = None):
        self.path = str(path)
        super().__init__(f"manifest not found: {self.path}", package, parent)


class MalformedManifest(LicenseAuditorError):
    """The manifest exists but could not be read or decoded."""

    kind = "malformed-manifest"

    def __init__(self, path, reason: str, package: Optional[str] = None, parent: Optional[str] = None):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"could not read manifest {self.path}: {reason}", package, parent)


class DependencyNotFound(LicenseAuditorError):
    """A declared dependency is not installed anywhere on the search path."""

    kind = "dependency-not-found"

    def __init__(self, name: str, searched_paths: List[str], parent: Optional[str] = None):
        self.name = name
        self.searched_paths = list(searched_paths)
        searched = "\n  - ".join(self.searched_paths)
        required_by = f" (required by {parent})" if parent else ""
        super().__init__(
            f"not found or read manifest for {name}{required_by}.\n  - {searched}",
            package=name,
            parent=parent,
        )


class PolicyViolation(LicenseAuditorError):
    """A package declares a license the compliance policy does not accept."""

    def __init__(self, verdict, message: str, package: Optional[str] = None, parent: Optional[str] = None):
        self.verdict = verdict
        super().__init__(message, package, parent)

    @property
    def kind(self) -> str:
        return self.verdict.value
