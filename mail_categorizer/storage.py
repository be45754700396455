"""SQLite storage for category definitions and applied assignments."""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Dict, Iterable, List, Tuple, Union

from .errors import CategoryValidationError


def parse_keywords(raw: Union[str, Iterable[str]]) -> List[str]:
    """Split comma-separated input, trimming entries and dropping blanks."""
    items = raw.split(",") if isinstance(raw, str) else raw
    return [str(item).strip() for item in items if str(item).strip()]


class SQLiteCategoryStore:
    """Persists category keyword lists in insertion order."""

    def __init__(self, db_path: str):
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(db_path)
        self.conn.row_factory = sqlite3.Row
        self._init_schema()

    def _init_schema(self) -> None:
        self.conn.execute(
            """
            CREATE TABLE IF NOT EXISTS categories (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL UNIQUE,
                keywords TEXT NOT NULL,
                created_at TEXT NOT NULL DEFAULT (datetime('now'))
            )
            """
        )
        self.conn.execute(
            """
            CREATE TABLE IF NOT EXISTS assignments (
                message_id TEXT NOT NULL,
                category TEXT NOT NULL,
                assigned_at TEXT NOT NULL DEFAULT (datetime('now')),
                PRIMARY KEY (message_id, category)
            )
            """
        )
        self.conn.execute("CREATE INDEX IF NOT EXISTS idx_assignments_message ON assignments(message_id)")
        self.conn.commit()

    def add_category(self, name: str, keywords: Union[str, Iterable[str]]) -> List[str]:
        """Create or replace a category; an existing name keeps its position."""
        clean_name = (name or "").strip()
        clean_keywords = parse_keywords(keywords)
        if not clean_name or not clean_keywords:
            raise CategoryValidationError("Category name and at least one keyword are required")

        self.conn.execute(
            """
            INSERT INTO categories (name, keywords) VALUES (?, ?)
            ON CONFLICT(name) DO UPDATE SET keywords=excluded.keywords
            """,
            (clean_name, json.dumps(clean_keywords, ensure_ascii=False)),
        )
        self.conn.commit()
        return clean_keywords

    def delete_category(self, name: str) -> bool:
        cur = self.conn.execute("DELETE FROM categories WHERE name = ?", (name,))
        self.conn.commit()
        return cur.rowcount > 0

    def get_all(self) -> Dict[str, Tuple[str, ...]]:
        """Snapshot of every category, in the order they were first added."""
        rows = self.conn.execute("SELECT name, keywords FROM categories ORDER BY id").fetchall()
        return {row["name"]: tuple(json.loads(row["keywords"])) for row in rows}

    def record_assignment(self, message_id: str, category: str) -> None:
        self.conn.execute(
            "INSERT OR IGNORE INTO assignments (message_id, category) VALUES (?, ?)",
            (message_id, category),
        )
        self.conn.commit()

    def assignments(self, message_id: str) -> List[str]:
        rows = self.conn.execute(
            "SELECT category FROM assignments WHERE message_id = ? ORDER BY assigned_at, rowid",
            (message_id,),
        ).fetchall()
        return [row["category"] for row in rows]

    def count(self) -> int:
        row = self.conn.execute("SELECT COUNT(*) AS n FROM categories").fetchone()
        return int(row["n"]) if row else 0

    def close(self) -> None:
        self.conn.close()
