#!/usr/bin/env python3
"""CLI for the UI audit: score a screenshot against the Carbon rule set."""

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from compliance.models import ROLE_TOKENS
from compliance.scoring import evaluate
from ui_audit.presentation import SEVERITY_PRESENTATION
from ui_audit.upload import UploadedImage


def main(argv: list[str] | None = None):
    load_dotenv()
    parser = argparse.ArgumentParser(
        description="Check a UI screenshot for Carbon Design System compliance."
    )
    parser.add_argument(
        "screenshot",
        type=Path,
        nargs="?",
        default=None,
        help="Path to the screenshot (PNG, JPG, GIF, ...)",
    )
    parser.add_argument(
        "--role",
        type=str,
        default=None,
        help=f"Your role, adds role-specific checks ({', '.join(ROLE_TOKENS)})",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output the audit result as JSON",
    )
    parser.add_argument(
        "--list-roles",
        action="store_true",
        help="List the known roles and exit",
    )

    args = parser.parse_args(argv)

    if args.list_roles:
        for role in ROLE_TOKENS:
            print(role)
        return

    if args.screenshot is None:
        print("Error: Provide a screenshot path", file=sys.stderr)
        sys.exit(1)

    try:
        upload = UploadedImage.from_path(args.screenshot)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if not upload.is_image:
        print(
            f"Error: {upload.filename} is not an image (type: {upload.content_type or 'unknown'})",
            file=sys.stderr,
        )
        sys.exit(1)

    if args.role and args.role not in ROLE_TOKENS:
        print(f"Warning: Unknown role '{args.role}', no role-specific checks applied.", file=sys.stderr)

    result = evaluate(args.role)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return

    stats = result.stats
    print("=== Carbon compliance ===")
    print(f"Screenshot: {upload.filename}")
    print(f"Score: {result.score}%")
    print(f"Errors: {stats.errors}  Warnings: {stats.warnings}  Info: {stats.info}")
    print(f"\nIssues found ({len(result.issues)}):")
    for issue in result.issues:
        label = SEVERITY_PRESENTATION[issue.severity].label
        print(f"  [{label}] {issue.message}")
        print(f"      {issue.suggestion}")


if __name__ == "__main__":
    main()
