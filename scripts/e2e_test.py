"""Minimal end-to-end validation script for a folder run."""

from __future__ import annotations

import json
import shutil
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from mail_categorizer.config import AppConfig  # noqa: E402
from mail_categorizer.pipeline import CategorizationPipeline  # noqa: E402


def main() -> None:
    tmp_root = PROJECT_ROOT / "data" / "tmp_e2e"
    inbox = tmp_root / "mail" / "Inbox"

    if tmp_root.exists():
        shutil.rmtree(tmp_root)
    inbox.mkdir(parents=True, exist_ok=True)

    (inbox / "001.json").write_text(
        json.dumps(
            {
                "subject": "Invoice 4471 overdue",
                "received": "2026-02-20T09:15:00+00:00",
                "body": (
                    "Please settle the invoice this week.\n\n"
                    "From: Accounts\nSent: 2/18/2026 10:02 AM\nReminder about the open invoice.\n"
                    "From: Accounts\nSent: 2026-02-01\nYour invoice is attached."
                ),
            }
        ),
        encoding="utf-8",
    )
    (inbox / "002.eml").write_text(
        (
            "From: Team <team@example.com>\n"
            "Subject: Lunch on Friday?\n"
            "Date: Fri, 20 Feb 2026 12:00:00 +0000\n"
            "Content-Type: text/plain; charset=utf-8\n\n"
            "Anyone up for lunch?\n"
        ),
        encoding="utf-8",
    )

    cfg = AppConfig.from_dict(
        {
            "paths": {
                "sqlite_path": str(tmp_root / "categories.db"),
                "mail_dir": str(tmp_root / "mail"),
            },
            "weights": {"score_threshold": 10},
            "logging": {"verbose": True},
        },
        base_dir=PROJECT_ROOT,
    )

    pipeline = CategorizationPipeline.from_config(cfg)
    pipeline.add_category("Finance", "invoice, overdue")
    pipeline.add_category("Social", "lunch")

    summary = pipeline.process_folder("Inbox")
    assert summary.ok, summary.error
    assert summary.processed == 2, "Expected two processed emails."
    assert summary.categorized == 2, "Expected both emails to be categorized."
    decisions = {r.message_id: r.decision for r in summary.results}
    assert decisions["Inbox/001.json"][0] == "Finance"
    assert decisions["Inbox/002.eml"][0] == "Social"
    assert pipeline.store.assignments("Inbox/001.json") == ["Finance"]

    print("E2E PASS")
    print(summary.message())
    pipeline.close()


if __name__ == "__main__":
    main()
