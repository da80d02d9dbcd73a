import pytest

from license_auditor.classifier import (
    LicenseClassifier,
    LicenseVerdict,
    evaluate_license,
    requires_attribution,
)
from license_auditor.models import Package, Severity


def tree(*children, dev=()):
    return Package(name="app", version="1.0.0", licenses=["MIT"],
                   dependencies=list(children), dev_dependencies=list(dev))


@pytest.mark.parametrize(
    "license_id, verdict",
    [
        ("", LicenseVerdict.UNKNOWN),
        (None, LicenseVerdict.UNKNOWN),
        ("CC0-1.0", LicenseVerdict.COMPLIANT),
        ("cc0", LicenseVerdict.COMPLIANT),
        ("CC-BY-4.0", LicenseVerdict.ACKNOWLEDGMENT_REQUIRED),
        ("CC-BY-SA-4.0", LicenseVerdict.ACKNOWLEDGMENT_REQUIRED),
        ("MIT", LicenseVerdict.COMPLIANT),
        ("mit-0", LicenseVerdict.COMPLIANT),
        ("ISC", LicenseVerdict.COMPLIANT),
        ("0BSD", LicenseVerdict.COMPLIANT),
        ("BSD-3-Clause", LicenseVerdict.COMPLIANT),
        ("BSD-2-Clause", LicenseVerdict.COMPLIANT),
        ("BSD", LicenseVerdict.ACKNOWLEDGMENT_REQUIRED),
        ("BSD-4-Clause", LicenseVerdict.ACKNOWLEDGMENT_REQUIRED),
        ("Apache-2.0", LicenseVerdict.COMPLIANT),
        ("Apache License 2.0", LicenseVerdict.COMPLIANT),
        ("Apache-1.0", LicenseVerdict.COMPLEX),
        ("Apache-1.1", LicenseVerdict.COMPLEX),
        ("GPL-3.0", LicenseVerdict.COMPLEX),
        ("LGPL-2.1-or-later", LicenseVerdict.COMPLEX),
        ("GNU AGPLv3", LicenseVerdict.COMPLEX),
        ("MPL-2.0", LicenseVerdict.COMPLEX),
        ("GPL-3.0-like-MPL", LicenseVerdict.COMPLEX),
        ("Unlicense", LicenseVerdict.UNSUPPORTED),
        ("CC-BY-3.0", LicenseVerdict.UNSUPPORTED),
        ("WTFPL", LicenseVerdict.UNSUPPORTED),
    ],
)
def test_evaluate_license(license_id, verdict):
    assert evaluate_license(license_id) is verdict


def test_rule_order_decides():
    # Matches both the MIT rule and the GPL rule; MIT comes first.
    assert evaluate_license("GPL-with-MIT-exception") is LicenseVerdict.COMPLIANT
    # CC0 is checked before the CC 4.0 family.
    assert evaluate_license("CC0-4.0") is LicenseVerdict.COMPLIANT


def test_compliant_tree_has_no_diagnostics():
    root = tree(
        Package(name="left-pad", version="1.3.0", licenses=["MIT"],
                dependencies=[Package(name="x", licenses=["Apache-2.0"])]),
        dev=[Package(name="tool", licenses=["ISC", "BSD-3-Clause"])],
    )

    assert LicenseClassifier().classify(root) == []


def test_root_is_not_classified():
    root = Package(name="app", licenses=[])

    assert LicenseClassifier().classify(root) == []


def test_empty_licenses_is_one_error():
    root = tree(Package(name="nolicense", version="0.1.0", licenses=[]))

    diagnostics = LicenseClassifier().classify(root)

    assert len(diagnostics) == 1
    assert diagnostics[0].severity is Severity.ERROR
    assert diagnostics[0].kind == "unknown-license"
    assert diagnostics[0].package == "nolicense"


def test_one_error_per_failing_license():
    root = tree(Package(name="mixed", version="2.0.0", licenses=["MIT", "GPL-3.0-like-MPL"]))

    diagnostics = LicenseClassifier().classify(root)

    assert [d.kind for d in diagnostics] == ["complex-license"]


def test_apache_versions():
    ok = tree(Package(name="a", licenses=["Apache-2.0"]))
    old = tree(Package(name="a", licenses=["Apache-1.0"]))

    assert LicenseClassifier().classify(ok) == []
    assert [d.kind for d in LicenseClassifier().classify(old)] == ["complex-license"]


def test_message_describes_edge():
    child = Package(name="thing", version="3.1.0", licenses=["CC-BY-4.0"])
    parent = Package(name="lib", version="1.0.0", licenses=["MIT", "ISC"], dependencies=[child])
    root = tree(dev=[parent])

    diagnostics = LicenseClassifier().classify(root)

    assert len(diagnostics) == 1
    message = diagnostics[0].message
    assert message.startswith("# uses a license that requires acknowledgment")
    assert "  lib@1.0.0: MIT,ISC" in message
    assert "  + thing@3.1.0: CC-BY-4.0" in message
    assert diagnostics[0].parent == "lib@1.0.0"


def test_dev_edge_is_marked():
    root = tree(dev=[Package(name="tool", version="1.0.0", licenses=["WTFPL"])])

    diagnostics = LicenseClassifier().classify(root)

    assert "  - tool@1.0.0: WTFPL" in diagnostics[0].message
    assert diagnostics[0].kind == "unsupported-license"
    assert diagnostics[0].parent == "app@1.0.0"


def test_classification_is_repeatable():
    root = tree(
        Package(name="a", licenses=["Apache-1.0", ""]),
        Package(name="b", licenses=[]),
        dev=[Package(name="c", licenses=["BSD"])],
    )
    classifier = LicenseClassifier()

    first = classifier.classify(root)

    assert first == classifier.classify(root)
    assert [d.kind for d in first] == [
        "complex-license",
        "unknown-license",
        "unknown-license",
        "acknowledgment-required",
    ]


def test_verdicts_keep_license_order():
    package = Package(name="a", licenses=["MPL-2.0", "MIT"])

    assert LicenseClassifier().verdicts(package) == [
        ("MPL-2.0", LicenseVerdict.COMPLEX),
        ("MIT", LicenseVerdict.COMPLIANT),
    ]


@pytest.mark.parametrize(
    "licenses, expected",
    [
        (["BSD-4-Clause"], True),
        (["CC-BY-4.0"], True),
        (["MIT", "cc-by-sa-4.0"], True),
        (["BSD-3-Clause"], False),
        (["MIT"], False),
        ([], False),
    ],
)
def test_requires_attribution(licenses, expected):
    assert requires_attribution(Package(name="x", licenses=licenses)) is expected
