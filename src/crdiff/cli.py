"""crdiff CLI: compare CustomResourceDefinitions between two revisions."""

import argparse
import sys
from importlib.metadata import version as get_version, PackageNotFoundError
from pathlib import Path


def _package_version() -> str:
    try:
        return get_version("crdiff")
    except PackageNotFoundError:
        return "dev"


def main():
    """Main CLI entry point for crdiff commands."""
    crdiff_version = _package_version()

    parser = argparse.ArgumentParser(
        prog="crdiff",
        description="crdiff: compare CustomResourceDefinitions and detect breaking changes"
    )
    parser.add_argument("--version", action="version", version=f"crdiff {crdiff_version}")

    # Common arguments
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "-o", "--output",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)"
    )
    parent_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging."
    )
    parent_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only log errors."
    )

    compare_parser = argparse.ArgumentParser(add_help=False)
    compare_parser.add_argument("base", type=Path, help="Base CRD file or directory")
    compare_parser.add_argument("revision", type=Path, help="Revision CRD file or directory")
    compare_parser.add_argument(
        "--versions",
        action="append",
        default=None,
        help="Only compare these versions (repeatable, comma-separated)"
    )
    compare_parser.add_argument(
        "--ignore-descriptions",
        action="store_true",
        help="Ignore changes that only affect descriptions"
    )
    compare_parser.add_argument(
        "--include-unchanged",
        action="store_true",
        help="Also report CRDs without changes"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # diff command
    diff_parser = subparsers.add_parser(
        "diff",
        help="Compare two CRD files/directories and print all differences",
        parents=[parent_parser, compare_parser]
    )
    diff_parser.add_argument(
        "--include-added-crds",
        action="store_true",
        help="Also report CRDs that only exist in the revision"
    )

    # breaking command
    subparsers.add_parser(
        "breaking",
        help="Compare two CRD files/directories and print all breaking differences",
        parents=[parent_parser, compare_parser]
    )

    # version command
    subparsers.add_parser(
        "version",
        help="Print the crdiff version",
        parents=[parent_parser]
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    from ._internal.logging import get_logger, setup_logging

    if args.verbose:
        level = "debug"
    elif args.quiet:
        level = "error"
    else:
        level = "info"
    setup_logging(level, json_output=args.output == "json")
    log = get_logger("cli")

    if args.command == "version":
        from ._internal.canonical_json import canonical_dumps

        if args.output == "json":
            print(canonical_dumps({"version": crdiff_version}))
        else:
            print(f"crdiff {crdiff_version}")
        sys.exit(0)

    if args.command in ("diff", "breaking"):
        # Lazy import: only import the kernel when a comparison is requested
        from .api import breaking, diff, render

        breaking_only = args.command == "breaking"

        try:
            base_path = Path(args.base).resolve()
            revision_path = Path(args.revision).resolve()

            if breaking_only:
                result = breaking(
                    base_path,
                    revision_path,
                    versions=args.versions,
                    ignore_descriptions=args.ignore_descriptions,
                    include_unchanged=args.include_unchanged,
                )
            else:
                result = diff(
                    base_path,
                    revision_path,
                    versions=args.versions,
                    ignore_descriptions=args.ignore_descriptions,
                    include_unchanged=args.include_unchanged,
                    include_added_crds=args.include_added_crds,
                )

            if not result.has_changes:
                # still print the report, so JSON output stays valid
                log.info("No changes detected.")

            print(render(result.report, output=args.output, breaking_only=breaking_only))
            sys.exit(0)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        except Exception as e:
            print(f"Unexpected error: {e}", file=sys.stderr)
            import traceback
            traceback.print_exc()
            sys.exit(1)

    parser.print_help()
    sys.exit(1)


if __name__ == "__main__":
    main()
