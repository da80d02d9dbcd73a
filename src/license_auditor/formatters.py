"""Render a collected package tree as text."""

import csv
import io
import json
from typing import Dict, Iterator, List, Optional, Tuple, Type

from .classifier import requires_attribution
from .models import Package

END_LINE = "\n"
INDENT = "|   "


class Formatter:
    """Base class for tree formatters.

    Args:
        include_root: Render the root package itself, not only what it depends on.
        show_all: Render every package, not only those needing attention.
    """

    name = ""

    def __init__(self, include_root: bool = False, show_all: bool = False):
        self.include_root = include_root
        self.show_all = show_all

    def format(self, package: Package) -> str:
        raise NotImplementedError

    def walk(self, package: Package) -> Iterator[Tuple[Package, Optional[Package], int, bool]]:
        """Yield ``(node, parent, depth, is_dev)`` in pre-order."""
        def visit(node, parent, depth, is_dev):
            yield node, parent, depth, is_dev
            for child, child_dev in node.iter_children():
                yield from visit(child, node, depth + 1, child_dev)

        if self.include_root:
            yield from visit(package, None, 0, False)
        else:
            for child, is_dev in package.iter_children():
                yield from visit(child, package, 1, is_dev)


class ListFormatter(Formatter):
    """Indented list of packages.

    A package is listed when it needs an attribution notice, when one of
    its descendants is listed, or when ``show_all`` is set.
    """

    name = "list"

    def format(self, package: Package) -> str:
        return self._write(package, 0, False)

    def _write(self, package: Package, nest: int, dev: bool) -> str:
        children = "".join(
            self._write(child, nest + 1, is_dev) for child, is_dev in package.iter_children()
        )
        if not children and not requires_attribution(package) and not self.show_all:
            return ""

        lines = []
        if nest > 0 or self.include_root:
            prefix = INDENT * max(0, nest - (0 if self.include_root else 1))
            lines.append(f"{'-' if dev else '+'} {package.name}")
            lines.append(f"{INDENT}version: {package.version}")
            lines.append(f"{INDENT}license: {','.join(package.licenses)}")
            if package.license_file:
                lines.append(f"{INDENT}licenseFile: {','.join(package.license_file)}")
            if package.publisher:
                lines.append(f"{INDENT}publisher: {package.publisher}")
            if package.email:
                lines.append(f"{INDENT}email: {package.email}")
            if package.url:
                lines.append(f"{INDENT}url: {package.url}")
            if package.repository:
                lines.append(f"{INDENT}repository: {package.repository}")
            lines = [prefix + line + END_LINE for line in lines]
        return "".join(lines) + children


class JSONFormatter(Formatter):
    """The whole tree, or only the root's dependency lists."""

    name = "json"

    def format(self, package: Package) -> str:
        if self.include_root:
            return json.dumps(package.to_dict(), indent=2)
        data: Dict[str, List[dict]] = {}
        if package.dependencies:
            data["dependencies"] = [p.to_dict() for p in package.dependencies]
        if package.dev_dependencies:
            data["devDependencies"] = [p.to_dict() for p in package.dev_dependencies]
        return json.dumps(data, indent=2)


class CSVFormatter(Formatter):
    """One row per package, multi-valued fields joined with ``;``."""

    name = "csv"
    columns = [
        "type", "depth", "parent", "name", "version", "licenses", "licenseFile",
        "publisher", "email", "url", "repository",
    ]

    def format(self, package: Package) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator=END_LINE)
        writer.writerow(self.columns)
        for node, parent, depth, is_dev in self.walk(package):
            writer.writerow([
                "dev" if is_dev else "prod",
                depth,
                parent.name if parent else "",
                node.name,
                node.version,
                ";".join(node.licenses),
                ";".join(node.license_file or []),
                node.publisher or "",
                node.email or "",
                node.url or "",
                node.repository or "",
            ])
        return buffer.getvalue()


class MarkdownFormatter(Formatter):
    """Markdown table of every package."""

    name = "markdown"

    def format(self, package: Package) -> str:
        lines = []
        lines.append("# Third-Party Software Licenses")
        lines.append("")
        lines.append(f"**Project:** {package.name}@{package.version}")
        lines.append("")
        lines.append("| Package | Version | Type | License | Attribution Required |")
        lines.append("|---------|---------|------|---------|---------------------|")

        for node, _, _, is_dev in self.walk(package):
            dep_type = "dev" if is_dev else "runtime"
            license_info = ", ".join(node.licenses) or "unknown"
            attribution = "Yes" if requires_attribution(node) else "No"
            lines.append(f"| {node.name} | {node.version} | {dep_type} | {license_info} | {attribution} |")

        lines.append("")
        return "\n".join(lines)


FORMATTERS: Dict[str, Type[Formatter]] = {
    cls.name: cls for cls in (ListFormatter, JSONFormatter, CSVFormatter, MarkdownFormatter)
}


def get_formatter(name: Optional[str], include_root: bool = False, show_all: bool = False) -> Formatter:
    """Look up a formatter by name; unknown names fall back to the list form."""
    cls = FORMATTERS.get((name or "").lower(), ListFormatter)
    return cls(include_root=include_root, show_all=show_all)


def format_package(package: Package, format_name: Optional[str] = None,
                   include_root: bool = False, show_all: bool = False) -> str:
    return get_formatter(format_name, include_root, show_all).format(package)
