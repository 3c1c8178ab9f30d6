"""Subject name normalization for raw-storage key lookup.

Raw per-game keys were written under more than one naming convention over
time: ``Aaron_Judge`` (canonical) and ``Aaron-Judge`` (legacy), sometimes with
the accents of the source feed left in. ``candidates`` lists every variant to
try, canonical first.
"""

from __future__ import annotations

import re
import unicodedata

_TOKEN_SEPARATORS = re.compile(r"[\s_\-]+")
_NON_ALNUM = re.compile(r"[^a-z0-9]")
_GLOB_SPECIAL = re.compile(r"([*?\[])")


def strip_diacritics(text: str) -> str:
    """Remove accents via NFD decomposition (``José`` -> ``Jose``)."""
    decomposed = unicodedata.normalize("NFD", text)
    return unicodedata.normalize("NFC", "".join(c for c in decomposed if unicodedata.category(c) != "Mn"))


def tokens(raw_name: str) -> list[str]:
    return [t for t in _TOKEN_SEPARATORS.split(raw_name.strip()) if t]


def candidates(raw_name: str) -> list[str]:
    """Return key variants for ``raw_name`` in lookup order.

    Underscore-joined ASCII (canonical), hyphen-joined ASCII (legacy), then the
    same two forms with diacritics preserved when they differ.
    """
    plain = tokens(strip_diacritics(raw_name))
    accented = tokens(unicodedata.normalize("NFC", raw_name))
    ordered = ["_".join(plain), "-".join(plain), "_".join(accented), "-".join(accented)]
    seen: set[str] = set()
    result: list[str] = []
    for variant in ordered:
        if variant and variant not in seen:
            seen.add(variant)
            result.append(variant)
    return result


def canonical(raw_name: str) -> str:
    variants = candidates(raw_name)
    return variants[0] if variants else ""


def display_name(key_name: str) -> str:
    return key_name.replace("_", " ")


def glob_escape(text: str) -> str:
    """Escape glob metacharacters so ``text`` matches itself in a scan pattern."""
    return _GLOB_SPECIAL.sub(r"[\1]", text)


def normalize_query(text: str) -> str:
    """Lowercase, accent-free, alphanumeric-only form used for name search."""
    return _NON_ALNUM.sub("", strip_diacritics(text).lower())


def matches_query(name: str, query: str) -> bool:
    needle = normalize_query(query)
    if not needle:
        return True
    return needle in normalize_query(name)
