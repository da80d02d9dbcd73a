"""
License compliance policy.

Every license string of every collected package is matched against
``LICENSE_RULES`` in order; the first matching rule decides the verdict.
The order matters: ``Apache-2.0`` has to reach the Apache rules before
the catch-all, ``CC0-1.0`` has to hit ``^cc0`` before ``^cc.*4``.
"""

import re
from enum import Enum
from typing import Iterable, List, NamedTuple, Optional, Tuple

from .exceptions import PolicyViolation
from .models import Diagnostic, Package


class LicenseVerdict(str, Enum):
    COMPLIANT = "compliant"
    ACKNOWLEDGMENT_REQUIRED = "acknowledgment-required"
    COMPLEX = "complex-license"
    UNSUPPORTED = "unsupported-license"
    UNKNOWN = "unknown-license"


class LicenseRule(NamedTuple):
    pattern: re.Pattern
    verdict: LicenseVerdict
    label: str


def _rule(pattern: str, verdict: LicenseVerdict, label: str) -> LicenseRule:
    return LicenseRule(re.compile(pattern, re.IGNORECASE), verdict, label)


LICENSE_RULES: Tuple[LicenseRule, ...] = (
    _rule(r"^cc0", LicenseVerdict.COMPLIANT, "CC0"),
    _rule(r"^cc.*4", LicenseVerdict.ACKNOWLEDGMENT_REQUIRED, "CC-BY-4.0"),
    _rule(r"mit", LicenseVerdict.COMPLIANT, "MIT"),
    _rule(r"isc", LicenseVerdict.COMPLIANT, "ISC"),
    _rule(r"0bsd|bsd.*0", LicenseVerdict.COMPLIANT, "0BSD"),
    _rule(r"bsd.*3", LicenseVerdict.COMPLIANT, "BSD-3-Clause"),
    _rule(r"bsd.*2", LicenseVerdict.COMPLIANT, "BSD-2-Clause"),
    _rule(r"bsd", LicenseVerdict.ACKNOWLEDGMENT_REQUIRED, "BSD/BSD-4-Clause"),
    _rule(r"apache.*2", LicenseVerdict.COMPLIANT, "Apache-2.0"),
    _rule(r"apache.*1", LicenseVerdict.COMPLEX, "Apache-1.0"),
    _rule(r"gnu|gpl", LicenseVerdict.COMPLEX, "GPL"),
    _rule(r"mpl", LicenseVerdict.COMPLEX, "MPL"),
)

HEADLINES = {
    LicenseVerdict.UNKNOWN: "uses an unknown or unextracted license",
    LicenseVerdict.ACKNOWLEDGMENT_REQUIRED: "uses a license that requires acknowledgment",
    LicenseVerdict.COMPLEX: "uses a complex license",
    LicenseVerdict.UNSUPPORTED: "uses an unsupported license",
}

ATTRIBUTION_PATTERNS = (
    re.compile(r"bsd.*4", re.IGNORECASE),
    re.compile(r"^cc.*4", re.IGNORECASE),
)


def evaluate_license(license_id: Optional[str], rules: Iterable[LicenseRule] = LICENSE_RULES) -> LicenseVerdict:
    """Return the verdict of the first rule matching ``license_id``."""
    if not license_id:
        return LicenseVerdict.UNKNOWN
    for rule in rules:
        if rule.pattern.search(license_id):
            return rule.verdict
    return LicenseVerdict.UNSUPPORTED


def requires_attribution(package: Package) -> bool:
    """Whether a license of ``package`` obliges shipping an attribution notice."""
    for license_id in package.licenses:
        if any(pattern.search(license_id) for pattern in ATTRIBUTION_PATTERNS):
            return True
    return False


def describe_edge(parent: Package, child: Package, is_dev: bool) -> str:
    return (
        f"  {parent.name}@{parent.version}: {','.join(parent.licenses)}\n"
        f"  {'-' if is_dev else '+'} {child.name}@{child.version}: {','.join(child.licenses)}"
    )


class LicenseClassifier:
    """Checks every package below a root against the license policy."""

    def __init__(self, rules: Iterable[LicenseRule] = LICENSE_RULES):
        self.rules = tuple(rules)

    def verdicts(self, package: Package) -> List[Tuple[str, LicenseVerdict]]:
        """Verdict for each declared license of ``package``, in order."""
        return [(license_id, evaluate_license(license_id, self.rules)) for license_id in package.licenses]

    def violations(self, parent: Package, package: Package, is_dev: bool) -> List[PolicyViolation]:
        context = describe_edge(parent, package, is_dev)
        parent_label = f"{parent.name}@{parent.version}"

        if not package.licenses:
            verdicts = [LicenseVerdict.UNKNOWN]
        else:
            verdicts = [verdict for _, verdict in self.verdicts(package)]

        return [
            PolicyViolation(verdict, f"# {HEADLINES[verdict]}\n{context}", package=package.name, parent=parent_label)
            for verdict in verdicts
            if verdict is not LicenseVerdict.COMPLIANT
        ]

    def classify(self, root: Package) -> List[Diagnostic]:
        """Classify every dependency and dev dependency below ``root``.

        The root itself is the audited project and is not checked.
        """
        diagnostics: List[Diagnostic] = []

        def visit(parent: Package):
            for child, is_dev in parent.iter_children():
                diagnostics.extend(Diagnostic.from_error(v) for v in self.violations(parent, child, is_dev))
                visit(child)

        visit(root)
        return diagnostics
