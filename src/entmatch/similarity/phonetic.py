"""Phonetic encoders and the comparators built on them.

Both encoders drop every non A-Z character before encoding, so
``"O'Brien"`` and ``"OBRIEN"`` share a code. Comparators return 1.0
only when both codes are equal and non-empty.
"""

from typing import Any

from entmatch.similarity.string_metrics import null_similarity

__all__ = [
    "SOUNDEX_CODES",
    "soundex_encode",
    "metaphone_encode",
    "soundex",
    "metaphone",
]

SOUNDEX_LENGTH = 4
METAPHONE_MAX_LENGTH = 4

SOUNDEX_CODES: dict[str, str] = {
    **dict.fromkeys("BFPV", "1"),
    **dict.fromkeys("CGJKQSXZ", "2"),
    **dict.fromkeys("DT", "3"),
    "L": "4",
    **dict.fromkeys("MN", "5"),
    "R": "6",
}

_VOWELS = frozenset("AEIOU")
_FRONT_VOWELS = frozenset("EIY")
_H_SILENCERS = frozenset("CGPST")


def _letters(value: str) -> str:
    return "".join(char for char in value.upper() if "A" <= char <= "Z")


def soundex_encode(value: str) -> str:
    """Encode *value* as a 4-character Soundex code.

    The first letter is kept; following consonants map to digit
    classes; vowels and H/W/Y are dropped and separate repeated
    digits; adjacent equal digits collapse; the code is zero padded.

    Returns
    -------
    str
        Code such as ``"R163"``, or ``""`` when *value* has no letters.

    Examples
    --------
    >>> soundex_encode("Robert"), soundex_encode("Rupert")
    ('R163', 'R163')
    >>> soundex_encode("Smyth")
    'S530'
    """
    letters = _letters(value) if value else ""
    if not letters:
        return ""

    code = letters[0]
    previous = SOUNDEX_CODES.get(code, "")

    for char in letters[1:]:
        digit = SOUNDEX_CODES.get(char)
        if digit is None:
            previous = ""
            continue
        if digit != previous:
            code += digit
            if len(code) == SOUNDEX_LENGTH:
                break
        previous = digit

    return code.ljust(SOUNDEX_LENGTH, "0")


def metaphone_encode(value: str, max_length: int | None = METAPHONE_MAX_LENGTH) -> str:
    """Encode *value* with the original Metaphone algorithm.

    Parameters
    ----------
    value : str
        Word to encode.
    max_length : int | None, optional
        Truncate the code to this many characters, by default 4.
        ``None`` keeps the full code.

    Returns
    -------
    str
        Metaphone key (``"0"`` stands for the TH sound), or ``""``.

    Examples
    --------
    >>> metaphone_encode("Smith"), metaphone_encode("Smyth")
    ('SM0', 'SM0')
    >>> metaphone_encode("Knight")
    'NT'
    """
    word = _letters(value) if value else ""
    if not word:
        return ""

    # initial-letter exceptions
    if word[:2] in ("AE", "GN", "KN", "PN", "WR"):
        word = word[1:]
    elif word[0] == "X":
        word = "S" + word[1:]
    elif word[:2] == "WH":
        word = "W" + word[2:]

    size = len(word)
    out: list[str] = []

    def at(index: int) -> str:
        return word[index] if 0 <= index < size else ""

    for i, char in enumerate(word):
        if char == at(i - 1) and char != "C":
            continue

        nxt = at(i + 1)
        after = at(i + 2)

        if char in _VOWELS:
            if i == 0:
                out.append(char)
        elif char == "B":
            if not (i == size - 1 and at(i - 1) == "M"):
                out.append("B")
        elif char == "C":
            if nxt == "I" and after == "A":
                out.append("X")
            elif nxt == "H":
                out.append("K" if at(i - 1) == "S" else "X")
            elif nxt in _FRONT_VOWELS:
                if at(i - 1) != "S":
                    out.append("S")
            else:
                out.append("K")
        elif char == "D":
            out.append("J" if nxt == "G" and after in _FRONT_VOWELS else "T")
        elif char == "G":
            if nxt == "H" and after not in _VOWELS:
                continue
            if nxt == "N" and (after == "" or (after == "E" and at(i + 3) == "D" and i + 4 == size)):
                continue
            if at(i - 1) == "D" and nxt in _FRONT_VOWELS:
                continue
            out.append("J" if nxt in _FRONT_VOWELS and at(i - 1) != "G" else "K")
        elif char == "H":
            if at(i - 1) in _H_SILENCERS:
                continue
            if nxt in _VOWELS and at(i - 1) not in _VOWELS:
                out.append("H")
        elif char == "K":
            if at(i - 1) != "C":
                out.append("K")
        elif char == "P":
            out.append("F" if nxt == "H" else "P")
        elif char == "Q":
            out.append("K")
        elif char == "S":
            if nxt == "H" or (nxt == "I" and after in ("O", "A")):
                out.append("X")
            else:
                out.append("S")
        elif char == "T":
            if nxt == "I" and after in ("O", "A"):
                out.append("X")
            elif nxt == "H":
                out.append("0")
            elif not (nxt == "C" and after == "H"):
                out.append("T")
        elif char == "V":
            out.append("F")
        elif char in "WY":
            if nxt in _VOWELS:
                out.append(char)
        elif char == "X":
            out.append("KS")
        elif char == "Z":
            out.append("S")
        else:
            # F J L M N R encode as themselves
            out.append(char)

    code = "".join(out)
    if max_length is not None:
        code = code[:max_length]
    return code


def _phonetic_equal(code_a: str, code_b: str, null_matches_null: bool) -> float:
    if not code_a and not code_b:
        return 1.0 if null_matches_null else 0.0
    if not code_a or not code_b:
        return 0.0
    return 1.0 if code_a == code_b else 0.0


def soundex(a: Any, b: Any, *, null_matches_null: bool = True) -> float:
    """Return 1.0 when *a* and *b* share a Soundex code.

    Examples
    --------
    >>> soundex("Smith", "Smyth")
    1.0
    >>> soundex("Smith", "Jones")
    0.0
    """
    nulls = null_similarity(a, b, null_matches_null)
    if nulls is not None:
        return nulls
    return _phonetic_equal(soundex_encode(str(a)), soundex_encode(str(b)), null_matches_null)


def metaphone(
    a: Any,
    b: Any,
    *,
    max_length: int | None = METAPHONE_MAX_LENGTH,
    null_matches_null: bool = True,
) -> float:
    """Return 1.0 when *a* and *b* share a Metaphone code."""
    nulls = null_similarity(a, b, null_matches_null)
    if nulls is not None:
        return nulls
    return _phonetic_equal(
        metaphone_encode(str(a), max_length),
        metaphone_encode(str(b), max_length),
        null_matches_null,
    )
