"""Character confusions seen in handwritten notation, and the readings they imply."""

# Each key maps to the characters it is commonly misread as, most likely first.
CONFUSION_MAP: dict[str, tuple[str, ...]] = {
    "0": ("O",),
    "O": ("0", "Q"),
    "8": ("B", "&"),
    "B": ("8", "R"),
    "6": ("b", "G"),
    "b": ("6",),
    "5": ("S",),
    "S": ("5",),
    "1": ("l", "I", "|"),
    "l": ("1", "I"),
    "I": ("1", "l"),
    "x": ("×", "X"),
    "+": ("†", "#"),
    "a": ("o",),
    "c": ("e",),
    "d": ("b", "cl"),
    "N": ("H", "M"),
    "Q": ("O", "0"),
    "K": ("R",),
    "R": ("K", "B"),
}


def alternatives(ch: str) -> tuple[str, ...]:
    return CONFUSION_MAP.get(ch, ())


def generate_candidates(token: str) -> tuple[str, ...]:
    """
    Alternate readings of ``token``, the token itself first.

    Single substitutions come next, by position and then by alternative
    order, followed by paired substitutions of every two adjacent
    characters. Duplicates keep their first position.
    """
    seen: dict[str, None] = {token: None}

    for i, ch in enumerate(token):
        for alt in alternatives(ch):
            seen.setdefault(token[:i] + alt + token[i + 1:])

    for i in range(len(token) - 1):
        for alt in alternatives(token[i]):
            for next_alt in alternatives(token[i + 1]):
                seen.setdefault(token[:i] + alt + next_alt + token[i + 2:])

    return tuple(seen)
