from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional

import pytest

from mail_categorizer.errors import BodyRetrievalError, CategoryApplyError, MessageListError
from mail_categorizer.reporting import StatusReporter
from mail_categorizer.schemas import Message

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeMailHost:
    """In-memory host; bodies come from Message.body unless overridden."""

    def __init__(self, folders: Optional[Dict[str, List[Message]]] = None):
        self.folders = folders or {}
        self.body_failures: set = set()
        self.apply_failures: set = set()
        self.list_failure: Optional[Exception] = None
        self.body_calls: List[str] = []
        self.applied: List[tuple] = []

    def list_folders(self) -> List[str]:
        return sorted(self.folders)

    def list_messages(self, folder: str) -> List[Message]:
        if self.list_failure is not None:
            raise self.list_failure
        if folder not in self.folders:
            raise MessageListError(f"Folder not found: {folder}")
        return list(self.folders[folder])

    def get_plain_text_body(self, message: Message) -> str:
        self.body_calls.append(message.id)
        if message.id in self.body_failures:
            raise BodyRetrievalError("host unavailable")
        return message.body

    def apply_category(self, message: Message, category: str) -> None:
        if message.id in self.apply_failures:
            raise CategoryApplyError("item is read-only")
        self.applied.append((message.id, category))
        if category not in message.categories:
            message.categories.append(category)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def host() -> FakeMailHost:
    return FakeMailHost()


@pytest.fixture
def reporter() -> StatusReporter:
    return StatusReporter(verbose=True)
