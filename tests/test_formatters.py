import csv
import io
import json

import pytest

from license_auditor.formatters import (
    CSVFormatter,
    JSONFormatter,
    ListFormatter,
    MarkdownFormatter,
    format_package,
    get_formatter,
)
from license_auditor.models import Package


@pytest.fixture
def root():
    notice = Package(
        name="notice",
        version="2.0.0",
        licenses=["BSD-4-Clause"],
        license_file=["node_modules/notice/LICENSE"],
        publisher="Jane Doe",
        email="jane@example.com",
        url="https://jane.dev",
        repository="github:jane/notice",
    )
    lib = Package(name="lib", version="1.0.0", licenses=["MIT"], dependencies=[notice])
    plain = Package(name="plain", version="0.1.0", licenses=["ISC"])
    tool = Package(name="tool", version="3.0.0", licenses=["MIT"])
    return Package(name="app", version="1.0.0", licenses=["MIT"],
                   dependencies=[lib, plain], dev_dependencies=[tool])


def test_list_shows_only_packages_needing_attribution(root):
    output = ListFormatter().format(root)

    assert output == (
        "+ lib\n"
        "|   version: 1.0.0\n"
        "|   license: MIT\n"
        "|   + notice\n"
        "|   |   version: 2.0.0\n"
        "|   |   license: BSD-4-Clause\n"
        "|   |   licenseFile: node_modules/notice/LICENSE\n"
        "|   |   publisher: Jane Doe\n"
        "|   |   email: jane@example.com\n"
        "|   |   url: https://jane.dev\n"
        "|   |   repository: github:jane/notice\n"
    )


def test_list_show_all_with_root(root):
    output = ListFormatter(include_root=True, show_all=True).format(root)
    lines = output.splitlines()

    assert lines[0] == "+ app"
    assert "|   + lib" in lines
    assert "|   |   + notice" in lines
    assert "|   + plain" in lines
    assert "|   - tool" in lines
    assert lines.index("|   + plain") < lines.index("|   - tool")


def test_list_empty_when_nothing_to_report():
    root = Package(name="app", dependencies=[Package(name="a", licenses=["MIT"])])

    assert ListFormatter().format(root) == ""


def test_json_with_root_round_trips(root):
    output = JSONFormatter(include_root=True).format(root)

    assert Package.from_dict(json.loads(output)) == root


def test_json_without_root(root):
    data = json.loads(JSONFormatter().format(root))

    assert list(data) == ["dependencies", "devDependencies"]
    assert [p["name"] for p in data["dependencies"]] == ["lib", "plain"]
    assert [p["name"] for p in data["devDependencies"]] == ["tool"]
    assert data["dependencies"][0]["dependencies"][0]["licenseFile"] == ["node_modules/notice/LICENSE"]


def test_csv_rows(root):
    rows = list(csv.DictReader(io.StringIO(CSVFormatter().format(root))))

    assert [(r["type"], r["depth"], r["parent"], r["name"]) for r in rows] == [
        ("prod", "1", "app", "lib"),
        ("prod", "2", "lib", "notice"),
        ("prod", "1", "app", "plain"),
        ("dev", "1", "app", "tool"),
    ]
    assert rows[1]["publisher"] == "Jane Doe"
    assert rows[1]["licenseFile"] == "node_modules/notice/LICENSE"


def test_csv_with_root_and_multiple_licenses():
    root = Package(name="app", dependencies=[Package(name="dual", licenses=["MIT", "Apache-2.0"])])

    rows = list(csv.DictReader(io.StringIO(CSVFormatter(include_root=True).format(root))))

    assert rows[0]["name"] == "app"
    assert rows[0]["parent"] == ""
    assert rows[1]["licenses"] == "MIT;Apache-2.0"


def test_markdown_table(root):
    output = MarkdownFormatter().format(root)

    assert "| notice | 2.0.0 | runtime | BSD-4-Clause | Yes |" in output
    assert "| tool | 3.0.0 | dev | MIT | No |" in output


@pytest.mark.parametrize(
    "name, cls",
    [
        ("list", ListFormatter),
        ("json", JSONFormatter),
        ("CSV", CSVFormatter),
        ("markdown", MarkdownFormatter),
        ("", ListFormatter),
        (None, ListFormatter),
        ("yaml", ListFormatter),
    ],
)
def test_get_formatter(name, cls):
    assert type(get_formatter(name)) is cls


def test_format_package_passes_options(root):
    assert format_package(root, "list", show_all=True).startswith("+ lib\n")
