"""CLI for listing, adding and deleting keyword categories."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from mail_categorizer.config import AppConfig  # noqa: E402
from mail_categorizer.errors import CategoryValidationError  # noqa: E402
from mail_categorizer.pipeline import CategorizationPipeline  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage keyword categories.")
    parser.add_argument(
        "--config",
        type=str,
        default=str(PROJECT_ROOT / "config.yaml"),
        help="Path to YAML config.",
    )
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("list", help="Show every category and its keywords.")

    add = sub.add_parser("add", help="Create or replace a category.")
    add.add_argument("name")
    add.add_argument("--keywords", required=True, help='Comma-separated, e.g. "invoice, bill".')

    delete = sub.add_parser("delete", help="Remove a category.")
    delete.add_argument("name")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    pipeline = CategorizationPipeline.from_config(AppConfig.from_yaml(args.config))
    try:
        if args.command == "add":
            try:
                keywords = pipeline.add_category(args.name, args.keywords)
            except CategoryValidationError as exc:
                print(f"Error: {exc}")
                return 1
            print(f"Saved {args.name.strip()}: {', '.join(keywords)}")
        elif args.command == "delete":
            if not pipeline.delete_category(args.name):
                print(f"No such category: {args.name}")
                return 1
            print(f"Deleted {args.name}")
        else:
            categories = pipeline.categories()
            if not categories:
                print("No categories defined.")
            for name, keywords in categories.items():
                print(f"{name}: {', '.join(keywords)}")
        return 0
    finally:
        pipeline.close()


if __name__ == "__main__":
    raise SystemExit(main())
