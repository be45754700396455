"""Mail host port and a local directory-backed mailbox."""

from __future__ import annotations

import json
import re
import sqlite3
from datetime import datetime, timezone
from email import policy
from email.message import EmailMessage
from email.parser import BytesParser
from pathlib import Path
from typing import TYPE_CHECKING, Any, List, Optional, Protocol

from bs4 import BeautifulSoup
from dateutil import parser as dt_parser

from .errors import BodyRetrievalError, CategoryApplyError, FolderLoadError, MessageListError
from .schemas import Message

if TYPE_CHECKING:
    from .storage import SQLiteCategoryStore


SUPPORTED_EXTENSIONS = {".eml", ".json"}


class MailHost(Protocol):
    """Operations the categorizer needs from a mail client."""

    def list_folders(self) -> List[str]:
        ...

    def list_messages(self, folder: str) -> List[Message]:
        ...

    def get_plain_text_body(self, message: Message) -> str:
        ...

    def apply_category(self, message: Message, category: str) -> None:
        ...


def _normalize_text(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def html_to_text(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()
    return soup.get_text("\n")


def _parse_optional_timestamp(value: object) -> Optional[datetime]:
    if value is None:
        return None
    try:
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(float(value), tz=timezone.utc)
        if isinstance(value, str) and value.strip():
            return dt_parser.parse(value)
    except (ValueError, OverflowError, OSError):
        return None
    return None


def _eml_text(msg: EmailMessage) -> str:
    part = msg.get_body(preferencelist=("plain",))
    if part is not None:
        return part.get_content()
    part = msg.get_body(preferencelist=("html",))
    if part is not None:
        return html_to_text(part.get_content())
    return ""


class LocalMailHost:
    """Treats sub-directories of ``root`` as folders of .eml/.json messages.

    Message ids are paths relative to ``root``. Category assignments are
    persisted through the category store when one is given.
    """

    def __init__(self, root: str, store: Optional["SQLiteCategoryStore"] = None):
        self.root = Path(root)
        self.store = store

    def list_folders(self) -> List[str]:
        if not self.root.is_dir():
            raise FolderLoadError(f"Mail directory not found: {self.root}")
        try:
            return sorted(
                child.relative_to(self.root).as_posix()
                for child in self.root.rglob("*")
                if child.is_dir()
            )
        except OSError as exc:
            raise FolderLoadError(f"Unable to list folders under {self.root}: {exc}") from exc

    def list_messages(self, folder: str) -> List[Message]:
        folder_path = self.root / folder
        if not folder_path.is_dir():
            raise MessageListError(f"Folder not found: {folder}")
        try:
            files = sorted(
                child
                for child in folder_path.iterdir()
                if child.is_file() and child.suffix.lower() in SUPPORTED_EXTENSIONS
            )
        except OSError as exc:
            raise MessageListError(f"Unable to list messages in {folder}: {exc}") from exc
        try:
            return [self._load_headers(path, folder) for path in files]
        except OSError as exc:
            raise MessageListError(f"Unable to read messages in {folder}: {exc}") from exc

    def get_plain_text_body(self, message: Message) -> str:
        path = self.root / message.id
        try:
            if path.suffix.lower() == ".eml":
                return _normalize_text(_eml_text(self._read_eml(path)))
            return _normalize_text(self._body_from_json(self._read_json(path)))
        except (OSError, ValueError, LookupError) as exc:
            raise BodyRetrievalError(f"Unable to read body of {message.id}: {exc}") from exc

    def apply_category(self, message: Message, category: str) -> None:
        if self.store is not None:
            try:
                self.store.record_assignment(message.id, category)
            except sqlite3.Error as exc:
                raise CategoryApplyError(f"Unable to assign {category} to {message.id}: {exc}") from exc
        if category not in message.categories:
            message.categories.append(category)

    def _load_headers(self, path: Path, folder: str) -> Message:
        message_id = path.relative_to(self.root).as_posix()
        subject = ""
        received = None
        if path.suffix.lower() == ".eml":
            msg = self._read_eml(path)
            subject = str(msg.get("Subject", "") or "")
            received = _parse_optional_timestamp(msg.get("Date"))
        else:
            try:
                data = self._read_json(path)
            except ValueError:
                data = {}
            subject = str(data.get("subject", "") or "")
            received = _parse_optional_timestamp(data.get("received") or data.get("date"))

        categories = self.store.assignments(message_id) if self.store is not None else []
        return Message(
            id=message_id,
            subject=subject,
            folder=folder,
            received=received,
            categories=list(categories),
        )

    @staticmethod
    def _read_eml(path: Path) -> EmailMessage:
        with path.open("rb") as fh:
            return BytesParser(policy=policy.default).parse(fh)

    @staticmethod
    def _read_json(path: Path) -> dict:
        raw = path.read_text(encoding="utf-8")
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in {path.name}")
        return data

    @staticmethod
    def _body_from_json(data: dict[str, Any]) -> str:
        body = data.get("body")
        if isinstance(body, str) and body:
            return body
        html = data.get("body_html")
        if isinstance(html, str) and html:
            return html_to_text(html)
        return ""
