"""
Dependency tree collection.

:class:`LicenseReporter` walks the manifest graph of a project and builds
a :class:`Package` tree. Each direct dependency gets its whole transitive
closure attached as a flat list of children; a name is resolved at most
once per direct dependency, which also breaks dependency cycles.
"""

import logging
from pathlib import Path
from typing import List, Optional, Set

from .classifier import LicenseClassifier
from .config import ReportOptions
from .exceptions import LicenseAuditorError
from .models import CollectionResult, DependencyInfo, Diagnostic, ManifestRecord, Package, Severity
from .parsers import ManifestParser
from .resolver import DependencyResolver

logger = logging.getLogger(__name__)


class LicenseReporter:
    """Collects and audits the dependency tree of one project."""

    def __init__(self, project_path: Path = None, options: Optional[ReportOptions] = None):
        """Initialize the reporter.

        Args:
            project_path: Directory holding the root manifest.
                         If None, uses current directory.
            options: Collection options; defaults to :class:`ReportOptions`.
        """
        self.project_root = Path(project_path).resolve() if project_path else Path.cwd()
        self.options = options or ReportOptions()
        self.parser = ManifestParser(
            self.project_root,
            manifest_name=self.options.manifest_name,
            absolute_license_file_paths=self.options.absolute_license_file_paths,
        )
        self.resolver = DependencyResolver(
            install_dir_name=self.options.install_dir_name,
            manifest_name=self.options.manifest_name,
        )

    def collect(self) -> CollectionResult:
        """Collect the dependency tree rooted at the project directory.

        Raises:
            ManifestNotFound: The project directory has no manifest.
            MalformedManifest: The root manifest cannot be decoded.
        """
        diagnostics: List[Diagnostic] = []
        record = self.parser.read(self.project_root)
        self._record_warnings(record, diagnostics)
        root = record.package

        root.dependencies = self._collect_direct(record.dependencies, root, diagnostics)
        if self.options.include_dev_dependencies:
            root.dev_dependencies = self._collect_direct(record.dev_dependencies, root, diagnostics)

        logger.debug(
            "Collected %d dependencies and %d dev dependencies for %s with %d diagnostics",
            len(root.dependencies), len(root.dev_dependencies), root.name, len(diagnostics),
        )
        return CollectionResult(root=root, diagnostics=diagnostics)

    def audit(self, classifier: Optional[LicenseClassifier] = None) -> CollectionResult:
        """Collect the tree and append the license classification diagnostics."""
        result = self.collect()
        classifier = classifier or LicenseClassifier()
        result.diagnostics.extend(classifier.classify(result.root))
        return result

    def is_excluded(self, package: Package) -> bool:
        if not self.options.include_private and package.private:
            return True
        return package.name in self.options.exclude_names

    def _collect_direct(self, declared: List[DependencyInfo], root: Package,
                        diagnostics: List[Diagnostic]) -> List[Package]:
        packages: List[Package] = []
        names: Set[str] = set()

        for dep in declared:
            if dep.name in self.options.exclude_names or dep.name in names:
                continue
            record = self._load(dep, self.project_root, root, diagnostics)
            if record is None or self.is_excluded(record.package) or record.package.name in names:
                continue

            package = record.package
            visited = {dep.name, package.name}
            closure: List[Package] = []
            self._collect_closure(record, 1, visited, closure, diagnostics)
            package.dependencies = closure

            names.update((dep.name, package.name))
            packages.append(package)
        return packages

    def _collect_closure(self, record: ManifestRecord, depth: int, visited: Set[str],
                         closure: List[Package], diagnostics: List[Diagnostic]):
        max_depth = self.options.max_depth
        if max_depth is not None and depth >= max_depth:
            return

        parent = record.package
        for dep in record.dependencies:
            if dep.name in visited or dep.name in self.options.exclude_names:
                continue

            # A failed lookup stays retryable from packages deeper in the branch.
            child = self._load(dep, Path(parent.path), parent, diagnostics)
            if child is None:
                continue
            visited.add(dep.name)
            if self.is_excluded(child.package):
                continue
            if child.package.name != dep.name:
                if child.package.name in visited:
                    continue
                visited.add(child.package.name)

            closure.append(child.package)
            self._collect_closure(child, depth + 1, visited, closure, diagnostics)

    def _load(self, dep: DependencyInfo, start_dir: Path, parent: Package,
              diagnostics: List[Diagnostic]) -> Optional[ManifestRecord]:
        """Resolve and read ``dep``; failures become diagnostics."""
        parent_label = f"{parent.name}@{parent.version}"
        try:
            directory = self.resolver.resolve(dep.name, start_dir, parent=parent_label)
            record = self.parser.read(directory)
        except LicenseAuditorError as e:
            if e.parent is None:
                e.parent = parent_label
            if e.package is None:
                e.package = dep.name
            logger.debug("Skipping %s: %s", dep.name, e.message)
            diagnostics.append(Diagnostic.from_error(e))
            return None

        self._record_warnings(record, diagnostics)
        return record

    @staticmethod
    def _record_warnings(record: ManifestRecord, diagnostics: List[Diagnostic]):
        for warning in record.warnings:
            diagnostics.append(Diagnostic(
                severity=Severity.WARNING,
                message=f"{record.package.path}: {warning}",
                kind="manifest-warning",
                package=record.package.name,
            ))
