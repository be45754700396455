"""CLI entrypoint for categorizing the messages of one folder."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from mail_categorizer.config import AppConfig  # noqa: E402
from mail_categorizer.errors import FolderLoadError  # noqa: E402
from mail_categorizer.pipeline import CategorizationPipeline  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Apply keyword categories to the messages of a folder.")
    parser.add_argument(
        "--config",
        type=str,
        default=str(PROJECT_ROOT / "config.yaml"),
        help="Path to YAML config.",
    )
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--folder", help="Folder to process, relative to the mail directory.")
    target.add_argument("--list-folders", action="store_true", help="Print available folders and exit.")
    parser.add_argument("--subject-weight", type=float, default=None)
    parser.add_argument("--body-weight", type=float, default=None)
    parser.add_argument("--recency-multiplier", type=float, default=None)
    parser.add_argument("--score-threshold", type=float, default=None)
    parser.add_argument("--verbose", action="store_true", help="Log per-keyword match counts.")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    config = AppConfig.from_yaml(args.config)
    if args.verbose:
        config.logging.verbose = True
        config.logging.level = "VERBOSE"

    pipeline = CategorizationPipeline.from_config(config)
    try:
        if args.list_folders:
            try:
                folders = pipeline.list_folders()
            except FolderLoadError as exc:
                print(f"Error loading folders: {exc}")
                return 1
            for folder in folders:
                print(folder)
            return 0

        weights = config.weights.override(
            subject_weight=args.subject_weight,
            body_weight=args.body_weight,
            recency_multiplier=args.recency_multiplier,
            score_threshold=args.score_threshold,
        )
        summary = pipeline.process_folder(args.folder, weights=weights)
        print(summary.message())
        return 0 if summary.ok else 1
    finally:
        pipeline.close()


if __name__ == "__main__":
    raise SystemExit(main())
