"""Size label matching for variants and restock lookups.

Catalogue sizes are free text ("Small (S)", "Medium", "2XL"), so requests are
matched in tiers from strict to loose; the first tier that finds a variant
wins.
"""

import re

UNSIZED = "N/A"

SIZE_ALIASES = {
    "xs": {"xs", "xsmall", "extra small"},
    "s": {"s", "small"},
    "m": {"m", "medium"},
    "l": {"l", "large"},
    "xl": {"xl", "xlarge", "extra large"},
    "xxl": {"xxl", "2xl", "2xlarge", "double extra large"},
    "3xl": {"3xl", "3xlarge", "triple extra large"},
}

_PARENTHETICAL = re.compile(r"\(([^)]*)\)")


def _contains_word(text: str, word: str) -> bool:
    return re.search(rf"(?<![\w]){re.escape(word)}(?![\w])", text) is not None


def normalize_size(size: str | None) -> str:
    if not size:
        return ""
    return " ".join(size.lower().split())


def is_unsized(size: str | None) -> bool:
    return normalize_size(size) in ("", "n/a", "na", "none")


def size_group(size: str | None) -> str | None:
    normalized = normalize_size(size)
    for group, labels in SIZE_ALIASES.items():
        if normalized in labels:
            return group
    return None


def size_labels(size: str | None) -> set[str]:
    """All labels a size answers to: itself, its text outside and inside parentheses."""
    normalized = normalize_size(size)
    labels = {normalized}
    outside = normalize_size(_PARENTHETICAL.sub(" ", normalized))
    if outside:
        labels.add(outside)
    labels.update(normalize_size(inner) for inner in _PARENTHETICAL.findall(normalized) if inner.strip())
    return labels


def sizes_equivalent(first: str | None, second: str | None) -> bool:
    """True when two sizes name the same physical size (direct or via alias group)."""
    if is_unsized(first) and is_unsized(second):
        return True
    if normalize_size(first) == normalize_size(second):
        return True
    for a in size_labels(first):
        for b in size_labels(second):
            if a == b:
                return True
            group = size_group(a)
            if group is not None and group == size_group(b):
                return True
    return False


def match_size(candidates, requested: str | None, key=lambda candidate: candidate):
    """Pick the candidate whose size best matches ``requested``, or ``None``.

    Tiers: exact (case-insensitive), parenthetical/alias equivalence, then
    substring containment as a last resort.
    """
    candidates = list(candidates)
    if is_unsized(requested):
        unsized = [c for c in candidates if is_unsized(key(c))]
        if unsized:
            return unsized[0]
        return candidates[0] if len(candidates) == 1 else None

    wanted = normalize_size(requested)
    for candidate in candidates:
        if normalize_size(key(candidate)) == wanted:
            return candidate

    for candidate in candidates:
        if not is_unsized(key(candidate)) and sizes_equivalent(key(candidate), requested):
            return candidate

    for candidate in candidates:
        size = normalize_size(key(candidate))
        if size and not is_unsized(size) and (_contains_word(size, wanted) or _contains_word(wanted, size)):
            return candidate

    return None
