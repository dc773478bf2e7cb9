"""Name, handle and URL normalization plus fuzzy name scoring."""
from __future__ import annotations

import re
from difflib import SequenceMatcher
from functools import lru_cache
from typing import Iterable, Optional, Sequence, Tuple

from rapidfuzz.distance import Levenshtein

from storedup.config import DEFAULT_BUSINESS_SUFFIXES, DEFAULT_TRANSLITERATIONS
from storedup.transliteration import Transliterator, get_default_transliterator

BUSINESS_SUFFIXES: Tuple[str, ...] = tuple(DEFAULT_BUSINESS_SUFFIXES.split(","))
TRANSLITERATIONS: Tuple[Tuple[str, str], ...] = DEFAULT_TRANSLITERATIONS

_NON_ALNUM = re.compile(r"[^a-z0-9]")

# First matching pattern wins; captures stop before a query string or trailing slash.
HANDLE_PATTERNS: Tuple[Tuple[str, re.Pattern], ...] = (
    ("instagram", re.compile(
        r"(?:https?://)?(?:www\.)?instagram\.com/([a-zA-Z0-9._]+)/?(?:\?.*)?$", re.IGNORECASE)),
    ("facebook", re.compile(
        r"(?:https?://)?(?:www\.)?(?:facebook|fb)\.com/([a-zA-Z0-9.]+)/?(?:\?.*)?$", re.IGNORECASE)),
    ("tiktok", re.compile(
        r"(?:https?://)?(?:www\.)?tiktok\.com/@?([a-zA-Z0-9._]+)/?(?:\?.*)?$", re.IGNORECASE)),
    ("whatsapp", re.compile(
        r"(?:https?://)?wa\.me/(\d+)/?(?:\?.*)?$", re.IGNORECASE)),
)


@lru_cache(maxsize=64)
def _suffix_pattern(suffix: str) -> re.Pattern:
    # ASCII word boundaries: accented letters next to a suffix do not protect it.
    return re.compile(r"\b" + re.escape(suffix) + r"\b", re.IGNORECASE | re.ASCII)


def normalize_name(
    name: str,
    suffixes: Iterable[str] = BUSINESS_SUFFIXES,
    substitutions: Sequence[Tuple[str, str]] = TRANSLITERATIONS,
) -> str:
    """Fold a store name into a lowercase ``[a-z0-9]`` comparison key.

    Business words (``shop``, ``store``, ``dz``...) are removed as whole
    words, then common French/English spelling variants are folded
    (``doum`` -> ``dum``, ``ph`` -> ``f``...).  Letters outside ASCII are
    dropped, not transliterated.
    """
    normalized = (name or "").lower()

    for suffix in suffixes:
        normalized = _suffix_pattern(suffix).sub("", normalized)

    for src, dst in substitutions:
        normalized = normalized.replace(src, dst)

    return _NON_ALNUM.sub("", normalized)


def normalize_to_alphanumeric(text: str, transliterator: Optional[Transliterator] = None) -> str:
    """Lowercase, transliterate to ASCII and keep only ``[a-z0-9]``."""
    if transliterator is None:
        transliterator = get_default_transliterator()
    text = (text or "").lower()
    text = transliterator.to_ascii_lower(text)
    return _NON_ALNUM.sub("", text)


def normalize_handle(handle: str) -> str:
    """Normalize a social media handle: no ``@``, lowercase, no dots or underscores."""
    handle = (handle or "").lstrip("@").lower()
    return handle.replace(".", "").replace("_", "")


def normalize_url(url: str) -> str:
    """Strip protocol, ``www.`` and trailing slashes; lowercase the rest."""
    url = re.sub(r"^https?://", "", url or "", flags=re.IGNORECASE)
    url = re.sub(r"^www\.", "", url, flags=re.IGNORECASE)
    return url.rstrip("/").lower()


def extract_handle_from_url(url: str) -> Optional[str]:
    """Return the username from an Instagram, Facebook, TikTok or WhatsApp URL."""
    if not url:
        return None
    for _platform, pattern in HANDLE_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def levenshtein_similarity(a: str, b: str) -> float:
    """``1 - distance / longest length``; 0.0 for two empty strings."""
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 0.0
    return 1.0 - (Levenshtein.distance(a, b) / max_len)


def similar_text_similarity(a: str, b: str) -> float:
    """Share of characters covered by recursive longest-common-substring matching.

    ``SequenceMatcher`` without junk detection finds the leftmost longest
    common block and recurses on both sides, so ``ratio()`` is
    ``2 * matched / (len(a) + len(b))``.
    """
    if not a and not b:
        return 0.0
    return SequenceMatcher(None, a, b, autojunk=False).ratio()


def calculate_similarity(
    a: str,
    b: str,
    suffixes: Iterable[str] = BUSINESS_SUFFIXES,
    substitutions: Sequence[Tuple[str, str]] = TRANSLITERATIONS,
) -> float:
    """Score two store names in [0, 1] after :func:`normalize_name`.

    Equal keys score 1.0, even when both are empty.  Otherwise returns the
    better of the Levenshtein and similar-text scores.
    """
    suffixes = tuple(suffixes)
    norm_a = normalize_name(a, suffixes, substitutions)
    norm_b = normalize_name(b, suffixes, substitutions)

    if norm_a == norm_b:
        return 1.0

    return max(levenshtein_similarity(norm_a, norm_b), similar_text_similarity(norm_a, norm_b))
