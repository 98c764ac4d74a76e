"""Share tokens: a compact, reversible text form of a timer snapshot.

Wire format::

    token = base64(percent_encode(";".join(f"{name}|{ms}|{tag_index}")))

``percent_encode`` matches JavaScript's ``encodeURIComponent`` so tokens
are interchangeable with the web build.  ``ms`` is the time spent
(see :func:`elapsed_for_total`) and ``tag_index`` the tag's palette
position.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from urllib.parse import parse_qs, quote, unquote, urlencode, urlsplit

from ..timer.errors import MalformedShareData
from ..timer.records import (
    TAG_PALETTE,
    SnapshotRecord,
    elapsed_for_total,
    tag_index,
)

log = logging.getLogger(__name__)

FIELD_SEP = "|"
RECORD_SEP = ";"
QUERY_PARAM = "share"

# Characters encodeURIComponent leaves alone besides letters and digits.
_URI_COMPONENT_SAFE = "-_.!~*'()"
_DIGITS = re.compile(r"[0-9]+")
# A "%" must introduce exactly two hex digits, as decodeURIComponent demands.
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _clean_name(name: str) -> str:
    return name.replace(FIELD_SEP, " ").replace(RECORD_SEP, " ")


def encode(records) -> str:
    """Token for *records* in collection order.

    Separator characters inside names are replaced by spaces; every other
    character survives the round trip.
    """
    payload = RECORD_SEP.join(
        FIELD_SEP.join((
            _clean_name(r.name),
            str(elapsed_for_total(r)),
            str(tag_index(r.tag)),
        ))
        for r in records
    )
    escaped = quote(payload, safe=_URI_COMPONENT_SAFE)
    return base64.b64encode(escaped.encode("ascii")).decode("ascii")


def _parse_item(item: str) -> SnapshotRecord:
    fields = item.split(FIELD_SEP)
    if len(fields) != 3:
        raise MalformedShareData(f"expected 3 fields, got {len(fields)}: {item!r}")
    name, ms_text, tag_text = fields
    if not _DIGITS.fullmatch(ms_text):
        raise MalformedShareData(f"time is not a number: {ms_text!r}")

    try:
        ms = int(ms_text)
        index = int(tag_text) if _DIGITS.fullmatch(tag_text) else 0
    except ValueError as exc:
        raise MalformedShareData(f"number out of range: {exc}") from exc
    if index >= len(TAG_PALETTE):
        index = 0
    return SnapshotRecord(
        name=name,
        duration=ms,
        tag=TAG_PALETTE[index].symbol,
    )


def decode(token: str) -> list[SnapshotRecord]:
    """Snapshot records from a token.  Raises ``MalformedShareData``."""
    token = (token or "").strip()
    if not token:
        return []

    # Query parsers turn an unescaped "+" into a space; base64 has no spaces.
    token = token.replace(" ", "+")
    token += "=" * (-len(token) % 4)
    try:
        escaped = base64.b64decode(token, validate=True).decode("ascii")
        if _BAD_ESCAPE.search(escaped):
            raise MalformedShareData(f"bad percent escape in {escaped!r}")
        payload = unquote(escaped, errors="strict")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise MalformedShareData(f"undecodable token: {exc}") from exc

    return [_parse_item(item) for item in payload.split(RECORD_SEP)]


def share_link(base_url: str, records) -> str:
    """*base_url* with the token as its ``share`` query parameter."""
    parts = urlsplit(base_url)
    query = urlencode({QUERY_PARAM: encode(records)})
    return parts._replace(query=query, fragment="").geturl()


def token_from_url(url: str) -> str | None:
    values = parse_qs(urlsplit(url).query).get(QUERY_PARAM)
    return values[0] if values else None


def load_shared(url_or_token: str) -> list[SnapshotRecord]:
    """Decode a shared link or bare token for read-only display.

    Malformed data is logged and yields no records.
    """
    token = url_or_token
    if "?" in url_or_token or "://" in url_or_token:
        token = token_from_url(url_or_token) or ""
    try:
        records = decode(token)
    except MalformedShareData as exc:
        log.warning("invalid share data: %s", exc)
        return []
    log.info("loaded %d shared timers", len(records))
    return records
