from __future__ import annotations

import logging
from typing import List, Mapping, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_RELATED_WORDS = [
    "melody",
    "harmony",
    "rhythm",
    "tempo",
    "pitch",
    "scale",
    "chord",
    "note",
    "tune",
    "beat",
    "symphony",
    "orchestra",
    "concert",
    "band",
    "guitar",
    "piano",
    "drums",
    "violin",
    "singer",
    "composer",
]


def parse_related_words(payload: Mapping) -> List[str]:
    raw = payload.get("related_words") if isinstance(payload, Mapping) else None
    if not raw:
        return list(DEFAULT_RELATED_WORDS)
    words = [w.strip() for w in str(raw).split(",") if w.strip()]
    return words or list(DEFAULT_RELATED_WORDS)


def fetch_related_words(
    phrase: str,
    url: Optional[str] = None,
    timeout: float = 5.0,
    http=requests,
) -> List[str]:
    """Ask the related-words service for words near ``phrase``.

    Never raises for service trouble: any failure falls back to
    :data:`DEFAULT_RELATED_WORDS`. No retries.
    """
    if not url:
        return list(DEFAULT_RELATED_WORDS)
    try:
        response = http.get(url, params={"input_word": phrase}, timeout=timeout)
        response.raise_for_status()
        payload = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning(f"Error fetching related words for {phrase!r}: {e}")
        return list(DEFAULT_RELATED_WORDS)
    words = parse_related_words(payload)
    logger.debug(f"Related words for {phrase!r}: {words}")
    return words
