"""Filler-word lexicon and transcript word counting."""

import re

FILLER_WORDS = frozenset({
    "um", "uh", "like", "so", "you know",
    "actually", "basically", "literally", "right",
})

_WORD_RE = re.compile(r"[\w']+")


def tokenize(text: str) -> list[str]:
    """
    Split transcript text into lowercase words.

    Punctuation is dropped; apostrophes stay inside words ("don't").
    """
    words = []
    for match in _WORD_RE.finditer(text.lower()):
        word = match.group(0).strip("'")
        if word:
            words.append(word)
    return words


def count_fillers(
    words: list[str],
    lexicon: frozenset[str] = FILLER_WORDS,
) -> tuple[int, dict[str, int]]:
    """
    Count filler words in a tokenized transcript.

    Multi-word entries ("you know") are matched as consecutive tokens and
    counted once; the longest entry wins when entries overlap.

    Args:
        words: Lowercase tokens as returned by tokenize()
        lexicon: Filler words and phrases to look for

    Returns:
        (total count, histogram) with histogram keys in first-seen order
    """
    phrases = sorted(
        (tuple(entry.split()) for entry in lexicon),
        key=len,
        reverse=True,
    )
    histogram: dict[str, int] = {}
    total = 0
    i = 0
    while i < len(words):
        for phrase in phrases:
            if tuple(words[i:i + len(phrase)]) == phrase:
                key = " ".join(phrase)
                histogram[key] = histogram.get(key, 0) + 1
                total += 1
                i += len(phrase)
                break
        else:
            i += 1
    return total, histogram


def validate_lexicon(entries: list[str] | frozenset[str]) -> frozenset[str]:
    """
    Normalise a user-supplied filler lexicon.

    Raises:
        ValueError: If the lexicon is empty or contains blank entries
    """
    normalised = set()
    for entry in entries:
        words = tokenize(entry)
        if not words:
            raise ValueError(f"Filler entry {entry!r} contains no words")
        normalised.add(" ".join(words))
    if not normalised:
        raise ValueError("Filler lexicon must not be empty")
    return frozenset(normalised)
