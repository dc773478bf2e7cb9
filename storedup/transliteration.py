"""Script transliteration used for strict alphanumeric name matching.

ICU (through PyICU) turns Arabic, Cyrillic or accented Latin store names into
plain ASCII.  When PyICU is not installed the engine keeps working with the
identity transform: non-ASCII letters are then dropped by the alphanumeric
filter, which only makes matching less precise.
"""
from abc import ABC, abstractmethod

from storedup.utils.logger import log_warning

try:
    import icu
    ICU_AVAILABLE = True
except ImportError:
    ICU_AVAILABLE = False

ICU_TRANSFORM_ID = "Any-Latin; Latin-ASCII; Lower()"


class Transliterator(ABC):
    """Converts text of any script to lowercase ASCII on a best-effort basis."""

    name = "abstract"

    @abstractmethod
    def to_ascii_lower(self, text: str) -> str:
        """Return ``text`` transliterated to ASCII and lowercased."""


class NullTransliterator(Transliterator):
    """Identity transform; characters outside ASCII are left as-is."""

    name = "none"

    def to_ascii_lower(self, text: str) -> str:
        return text.lower()


class IcuTransliterator(Transliterator):
    """ICU ``Any-Latin; Latin-ASCII; Lower()`` transform."""

    name = "icu"

    def __init__(self, transform_id: str = ICU_TRANSFORM_ID):
        if not ICU_AVAILABLE:
            raise ImportError("PyICU is required for ICU transliteration")
        self.transform_id = transform_id
        self._transliterator = icu.Transliterator.createInstance(transform_id)

    def to_ascii_lower(self, text: str) -> str:
        return self._transliterator.transliterate(text)


_default = None


def get_transliterator(kind: str = "auto") -> Transliterator:
    """Build a transliterator for the configured backend.

    ``auto`` and ``icu`` both fall back to :class:`NullTransliterator` with a
    warning when PyICU is missing.
    """
    kind = (kind or "auto").lower()
    if kind == "none":
        return NullTransliterator()

    if ICU_AVAILABLE:
        return IcuTransliterator()

    log_warning("PyICU not installed; script transliteration disabled",
                requested=kind)
    return NullTransliterator()


def get_default_transliterator() -> Transliterator:
    """Process-wide transliterator selected from the global configuration."""
    global _default
    if _default is None:
        from storedup.config import get_config
        _default = get_transliterator(get_config().transliterator)
    return _default
