"""Thread segmentation of quoted/forwarded email chains."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from dateutil import parser as dt_parser

from .schemas import ThreadSegment


FROM_MARKER_RE = re.compile(r"From:", re.IGNORECASE)
SENT_MARKER_RE = re.compile(r"Sent:", re.IGNORECASE)

# M/D/YYYY or YYYY-MM-DD; any time part after it is ignored.
DATE_RE = re.compile(r"(?P<month>\d{1,2})/(?P<day>\d{1,2})/(?P<year>\d{4})|(?P<iso>\d{4}-\d{2}-\d{2})")

SYNTHETIC_STEP = timedelta(days=1)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _first_sent_date(text: str) -> Optional[re.Match]:
    for line in text.splitlines():
        marker = SENT_MARKER_RE.search(line)
        if marker is None:
            continue
        match = DATE_RE.search(line, marker.end())
        if match is not None:
            return match
    return None


def parse_sent_date(text: str) -> Optional[datetime]:
    """Return the date on the first dated Sent: line of ``text``, or None.

    Dates are parsed strictly, so 13/45/2024 yields None rather than a
    rolled-over guess.
    """
    match = _first_sent_date(text)
    if not match:
        return None
    if match.group("iso"):
        raw = match.group("iso")
    else:
        raw = f"{match.group('year')}-{int(match.group('month')):02d}-{int(match.group('day')):02d}"
    try:
        return _as_utc(dt_parser.isoparse(raw))
    except (ValueError, OverflowError):
        return None


class ThreadSegmenter:
    """Splits a plain-text body into chain segments, newest first."""

    def split_blocks(self, body: str) -> List[str]:
        """Header blocks in discovery order; the whole body if there are none.

        A block starts at a "From:" marker and runs up to the next one or the
        end of the body. Blocks without a "Sent:" marker are not headers.
        """
        starts = [m.start() for m in FROM_MARKER_RE.finditer(body)]
        ends = starts[1:] + [len(body)]
        blocks = [body[start:end] for start, end in zip(starts, ends)]
        blocks = [block for block in blocks if SENT_MARKER_RE.search(block)]
        return blocks or [body]

    def segment(self, body: Optional[str], now: Optional[datetime] = None) -> List[ThreadSegment]:
        anchor = _as_utc(now) if now is not None else datetime.now(timezone.utc)
        body = body or ""
        if not body:
            return [ThreadSegment(text="", timestamp=anchor, synthetic=True)]

        segments: List[ThreadSegment] = []
        for index, block in enumerate(self.split_blocks(body)):
            parsed = parse_sent_date(block)
            if parsed is None:
                segments.append(
                    ThreadSegment(text=block, timestamp=anchor - index * SYNTHETIC_STEP, synthetic=True)
                )
            else:
                segments.append(ThreadSegment(text=block, timestamp=parsed))

        # sorted() is stable, so exact ties keep discovery order.
        return sorted(segments, key=lambda seg: seg.timestamp, reverse=True)
