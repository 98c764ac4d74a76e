"""Ordered, capacity-limited collection of timer records."""

from __future__ import annotations

import itertools
import json
import logging
from typing import Iterator

from .errors import InvalidValue, LimitReached, NotFound, ValidationWarning
from .records import (
    MAX_TIMERS,
    NAME_SOFT_LIMIT,
    NO_TAG,
    TAG_SYMBOLS,
    TimerRecord,
)

log = logging.getLogger(__name__)


class TimerStore:
    """Owns the timers in insertion order.

    Policies enforced here:

    * never more than ``MAX_TIMERS`` records;
    * ids are unique, drawn from a counter that starts above every id
      already present;
    * new timers get the first unused tag (soft uniqueness);
    * at most one record has ``show_in_title``.
    """

    def __init__(self, records: list[TimerRecord] | None = None) -> None:
        self._records: list[TimerRecord] = list(records or [])
        start = max((r.id for r in self._records), default=0) + 1
        self._ids = itertools.count(start)

    # ── collection ───────────────────────────────────────────────────

    def __iter__(self) -> Iterator[TimerRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def list(self) -> list[TimerRecord]:
        return list(self._records)

    @property
    def is_full(self) -> bool:
        return len(self._records) >= MAX_TIMERS

    def create(self) -> TimerRecord:
        if self.is_full:
            raise LimitReached(MAX_TIMERS)
        record = TimerRecord(id=next(self._ids), tag=self.assign_available_tag())
        self._records.append(record)
        log.debug("created timer %d tagged %s", record.id, record.tag)
        return record

    def remove(self, timer_id: int) -> bool:
        """Drop the timer.  Absent ids are ignored; returns whether one went."""
        for i, record in enumerate(self._records):
            if record.id == timer_id:
                del self._records[i]
                return True
        return False

    def find(self, timer_id: int) -> TimerRecord:
        for record in self._records:
            if record.id == timer_id:
                return record
        raise NotFound(timer_id)

    # ── tags ─────────────────────────────────────────────────────────

    def _used_tags(self, excluding_id: int | None = None) -> set[str]:
        return {r.tag for r in self._records if r.id != excluding_id}

    def assign_available_tag(self) -> str:
        used = self._used_tags()
        for symbol in TAG_SYMBOLS:
            if symbol != NO_TAG and symbol not in used:
                return symbol
        return NO_TAG

    def available_tags(self, timer_id: int) -> list[str]:
        """Tags a selector should offer for this timer, in palette order."""
        own = self.find(timer_id).tag
        taken = self._used_tags(excluding_id=timer_id)
        return [
            s for s in TAG_SYMBOLS
            if s == NO_TAG or s == own or s not in taken
        ]

    def retag(self, timer_id: int, tag: str) -> None:
        if tag not in TAG_SYMBOLS:
            raise InvalidValue(f"{tag!r} is not a palette tag")
        self.find(timer_id).tag = tag

    # ── other per-record mutators ────────────────────────────────────

    def rename(self, timer_id: int, name: str) -> ValidationWarning | None:
        """Rename; an over-long name is stored anyway and reported back."""
        self.find(timer_id).name = name
        if len(name) > NAME_SOFT_LIMIT:
            return ValidationWarning(
                f"Name is too long! Please shorten it to under "
                f"{NAME_SOFT_LIMIT} characters."
            )
        return None

    def set_title_timer(self, timer_id: int, flag: bool) -> None:
        target = self.find(timer_id)
        if flag:
            for record in self._records:
                record.show_in_title = False
        target.show_in_title = flag

    def title_timer(self) -> TimerRecord | None:
        for record in self._records:
            if record.show_in_title:
                return record
        return None

    def any_running(self) -> bool:
        return any(r.is_running for r in self._records)

    def any_other_running(self, excluding_id: int) -> bool:
        return any(r.is_running and r.id != excluding_id for r in self._records)

    # ── JSON ─────────────────────────────────────────────────────────

    def dump(self) -> str:
        return json.dumps([r.to_dict() for r in self._records], ensure_ascii=False)

    @classmethod
    def load(cls, text: str | None) -> TimerStore:
        """Rebuild a store from :meth:`dump` output.

        Unreadable data gives an empty store; bad entries are skipped.
        Extra entries beyond capacity are dropped, and the title flag is
        kept on the first record only.
        """
        if not text:
            return cls()
        try:
            raw = json.loads(text)
        except ValueError:
            log.warning("stored timers are not valid JSON; starting empty")
            return cls()
        if not isinstance(raw, list):
            log.warning("stored timers are not a list; starting empty")
            return cls()

        records: list[TimerRecord] = []
        seen: set[int] = set()
        for item in raw:
            try:
                record = TimerRecord.from_dict(item)
            except (KeyError, TypeError, ValueError) as exc:
                log.warning("skipping unreadable stored timer %r: %s", item, exc)
                continue
            if record.id in seen:
                log.warning("skipping duplicate stored timer id %d", record.id)
                continue
            seen.add(record.id)
            records.append(record)

        if len(records) > MAX_TIMERS:
            log.warning("dropping %d stored timers over capacity", len(records) - MAX_TIMERS)
            records = records[:MAX_TIMERS]

        titled = False
        for record in records:
            if record.show_in_title:
                if titled:
                    record.show_in_title = False
                titled = True

        log.info("loaded %d timers", len(records))
        return cls(records)
