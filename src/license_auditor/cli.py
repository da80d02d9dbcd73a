"""
Command-line interface.

Usage:
    # Audit the project in the current directory
    license-auditor

    # Audit a specific project, dev dependencies included
    license-auditor /path/to/project --dev

    # Write every package as JSON and fail on policy violations
    license-auditor --format json --output-all --include-root -o licenses.json --return-error
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import ReportOptions, load_config, parse_exclude
from .core import LicenseReporter
from .exceptions import LicenseAuditorError
from .formatters import FORMATTERS, format_package
from .models import Diagnostic, Severity


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="license-auditor",
        description="Audit the licenses of a project's installed dependency tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Audit current directory
  license-auditor

  # Include development dependencies, skip some packages
  license-auditor --dev --exclude "left-pad,is-odd"

  # Save the full tree as CSV
  license-auditor --format csv --output-all -o THIRD_PARTY_LICENSES.csv

Options may also be set in license-auditor.toml, .license-auditor.yml
or [tool.license-auditor] in pyproject.toml; flags take precedence.
        """
    )

    parser.add_argument("project_path", nargs="?", default=".",
                        help="Path to project directory (default: current directory)")

    # Collection options
    parser.add_argument("--dev", dest="include_dev", action="store_true",
                        help="Include the root's development dependencies")
    parser.add_argument("--include-private", action="store_true",
                        help="Keep packages marked private")
    parser.add_argument("--exclude",
                        help="Comma-separated list of package names to exclude")
    parser.add_argument("--max-depth", type=int,
                        help="Deepest dependency level to traverse (direct dependencies are level 1)")
    parser.add_argument("--absolute-license-paths", action="store_true",
                        help="Report license files as absolute paths")

    # Output options
    parser.add_argument("--format", "-f", choices=sorted(FORMATTERS), default="list",
                        help="Output format (default: list)")
    parser.add_argument("--include-root", action="store_true",
                        help="Include the audited project itself in the output")
    parser.add_argument("--output-all", action="store_true",
                        help="List every package, not only those requiring attribution")
    parser.add_argument("--output", "-o", help="Output file (default: stdout)")
    parser.add_argument("--output-force", action="store_true",
                        help="Write the output file even when the output is empty")
    parser.add_argument("--quiet", "-q", action="store_true",
                        help="Do not echo diagnostics or output to the console")
    parser.add_argument("--return-error", action="store_true",
                        help="Exit with status 1 when any license error is found")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable debug logging")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Config file values become defaults, then the command line is re-read on top.
    config = load_config(Path(args.project_path))
    if config:
        parser.set_defaults(**config)
        args = parser.parse_args(argv)
    return args


def print_diagnostics(diagnostics: List[Diagnostic], quiet: bool = False):
    if quiet:
        return
    for item in diagnostics:
        if item.severity is Severity.INFO:
            print(f"#info:: {item.message}")
        elif item.severity is Severity.WARNING:
            print(f"warn:: {item.message}")
        else:
            print(f"err :: {item.message}", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    project_path = Path(args.project_path).resolve()
    if not project_path.exists():
        print(f"Error: Project path '{project_path}' does not exist", file=sys.stderr)
        return 1

    try:
        options = ReportOptions(
            include_dev_dependencies=args.include_dev,
            include_private=args.include_private,
            exclude_names=parse_exclude(args.exclude),
            max_depth=max(1, args.max_depth) if args.max_depth is not None else None,
            absolute_license_file_paths=args.absolute_license_paths,
        )
        result = LicenseReporter(project_path, options).audit()
    except LicenseAuditorError as e:
        print_diagnostics([Diagnostic.from_error(e)], args.quiet)
        return 1

    print_diagnostics(result.diagnostics, args.quiet)

    output = format_package(
        result.root,
        args.format,
        include_root=args.include_root,
        show_all=args.output_all,
    )

    if args.output:
        if output or args.output_force:
            try:
                with open(args.output, "w", encoding="utf-8") as f:
                    f.write(output)
            except OSError as e:
                print(f"Error writing to {args.output}: {e}", file=sys.stderr)
                return 1
            if not args.quiet:
                print(f"License report written to {args.output}")
    elif not args.quiet:
        print(output)

    if args.return_error and result.has_errors:
        return 1
    return 0
