import re
import unicodedata
from typing import List, Optional

_WHITESPACE = re.compile(r"\s+")
# anything but letters, numbers, whitespace, apostrophe and hyphen
_NON_WORD = re.compile(r"[^\w\s'-]|_")


def _strip_marks(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def fold(text: Optional[str]) -> str:
    """Lower-case, drop diacritics and collapse whitespace. Punctuation is kept."""
    s = _strip_marks((text or "").lower())
    return _WHITESPACE.sub(" ", s).strip()


def normalize(text: Optional[str]) -> str:
    """Fold the text and replace punctuation/symbols with spaces.

    >>> normalize("  L'Été, déjà fini!  ")
    "l'ete deja fini"
    """
    s = _strip_marks((text or "").lower())
    s = _NON_WORD.sub(" ", s)
    return _WHITESPACE.sub(" ", s).strip()


def tokenize(text: Optional[str]) -> List[str]:
    return [t for t in normalize(text).split(" ") if t]
