"""
License Auditor - dependency tree license compliance checker

Walks a project's installed dependency tree, starting at its root
manifest, extracts license and publisher metadata for every package and
checks each license against a fixed compliance policy.

Features:
- Nested installation resolution (inner installations shadow outer ones)
- Cycle and duplicate suppression, depth limits, name and private exclusion
- License file discovery next to each manifest
- Ordered rule-based license classification with self-explanatory diagnostics
- Multiple output formats: list, JSON, CSV, markdown
"""

__version__ = "1.0.0"
__author__ = "License Auditor Contributors"
__email__ = "license-auditor@example.com"

from .classifier import LicenseClassifier, LicenseVerdict, evaluate_license
from .config import ReportOptions
from .core import LicenseReporter
from .exceptions import (
    DependencyNotFound,
    LicenseAuditorError,
    MalformedManifest,
    ManifestNotFound,
    PolicyViolation,
)
from .formatters import CSVFormatter, JSONFormatter, ListFormatter, MarkdownFormatter, format_package
from .models import CollectionResult, DependencyInfo, Diagnostic, Package, Severity
from .parsers import ManifestParser
from .resolver import DependencyResolver
from .cli import main

__all__ = [
    "LicenseReporter",
    "ReportOptions",
    "ManifestParser",
    "DependencyResolver",
    "LicenseClassifier",
    "LicenseVerdict",
    "evaluate_license",
    "Package",
    "DependencyInfo",
    "Diagnostic",
    "Severity",
    "CollectionResult",
    "LicenseAuditorError",
    "ManifestNotFound",
    "MalformedManifest",
    "DependencyNotFound",
    "PolicyViolation",
    "ListFormatter",
    "JSONFormatter",
    "CSVFormatter",
    "MarkdownFormatter",
    "format_package",
    "main",
]
