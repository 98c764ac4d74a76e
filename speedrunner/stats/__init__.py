"""Stats package."""

from .aggregator import (
    Breakdown,
    Segment,
    ShareSummary,
    breakdown,
    can_share,
    share_summary,
    NO_DATA_LABEL,
)
from .share import encode, decode, share_link, token_from_url, load_shared

__all__ = [
    "Breakdown",
    "Segment",
    "ShareSummary",
    "breakdown",
    "can_share",
    "share_summary",
    "NO_DATA_LABEL",
    "encode",
    "decode",
    "share_link",
    "token_from_url",
    "load_shared",
]
