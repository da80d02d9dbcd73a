"""Data structures shared by the collector, classifier and formatters."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class DependencyInfo:
    """One ``name: range`` entry of a manifest dependency map, unresolved."""

    name: str
    version_spec: str = ""
    dep_type: str = "runtime"  # runtime, dev


@dataclass
class Package:
    """One node in the collected dependency tree.

    Children are owned by their parent: a package required from two
    places in the tree is represented by two separate instances.
    """

    name: str
    version: str = ""
    path: str = ""
    licenses: List[str] = field(default_factory=list)
    license_file: Optional[List[str]] = None
    repository: Optional[str] = None
    publisher: Optional[str] = None
    email: Optional[str] = None
    url: Optional[str] = None
    private: bool = False
    dependencies: List["Package"] = field(default_factory=list)
    dev_dependencies: List["Package"] = field(default_factory=list)

    def iter_children(self):
        """Yield ``(child, is_dev)`` for production then dev dependencies."""
        for child in self.dependencies:
            yield child, False
        for child in self.dev_dependencies:
            yield child, True

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "path": self.path,
            "version": self.version,
            "licenses": list(self.licenses),
        }
        if self.license_file:
            data["licenseFile"] = list(self.license_file)
        for key in ("repository", "publisher", "email", "url"):
            value = getattr(self, key)
            if value:
                data[key] = value
        if self.private:
            data["private"] = True
        if self.dependencies:
            data["dependencies"] = [p.to_dict() for p in self.dependencies]
        if self.dev_dependencies:
            data["devDependencies"] = [p.to_dict() for p in self.dev_dependencies]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Package":
        return cls(
            name=data.get("name", ""),
            version=data.get("version", ""),
            path=data.get("path", ""),
            licenses=list(data.get("licenses", [])),
            license_file=list(data["licenseFile"]) if data.get("licenseFile") else None,
            repository=data.get("repository"),
            publisher=data.get("publisher"),
            email=data.get("email"),
            url=data.get("url"),
            private=bool(data.get("private", False)),
            dependencies=[cls.from_dict(d) for d in data.get("dependencies", [])],
            dev_dependencies=[cls.from_dict(d) for d in data.get("devDependencies", [])],
        )


@dataclass
class ManifestRecord:
    """Normalized contents of one manifest file."""

    package: Package
    dependencies: List[DependencyInfo] = field(default_factory=list)
    dev_dependencies: List[DependencyInfo] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    """One collection or classification finding."""

    severity: Severity
    message: str
    kind: str = ""
    package: Optional[str] = None
    parent: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    @classmethod
    def from_error(cls, error, severity: Severity = Severity.ERROR) -> "Diagnostic":
        return cls(
            severity=severity,
            message=error.message,
            kind=error.kind,
            package=error.package,
            parent=error.parent,
        )


@dataclass
class CollectionResult:
    """The collected tree together with the diagnostics recorded on the way."""

    root: Package
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(d.is_error for d in self.diagnostics)
