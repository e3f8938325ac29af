"""Answer normalization and lenient comparison for quiz answers."""

from __future__ import annotations

import re
import unicodedata

# Leading determiners ignored when comparing answers
ARTICLES: tuple[str, ...] = (
    # Portuguese
    "o", "a", "os", "as", "um", "uma", "uns", "umas",
    # French
    "le", "la", "les", "l'", "un", "une", "des", "du", "de la", "de l'",
)

# "de la" must win over "la", so scan longest first
_ARTICLES_LONGEST_FIRST = sorted(ARTICLES, key=len, reverse=True)
_ELIDED_ARTICLES = [a for a in _ARTICLES_LONGEST_FIRST if a.endswith("'")]

# Phone keyboards type ’ for the elision apostrophe
_APOSTROPHES = str.maketrans({"\u2019": "'", "\u02bc": "'", "\u2018": "'"})

_COMBINING_MARKS = re.compile(r"[\u0300-\u036f]")

_ACCENT_TABLE = str.maketrans({
    "à": "a", "á": "a", "â": "a", "ã": "a", "ä": "a", "å": "a",
    "è": "e", "é": "e", "ê": "e", "ë": "e",
    "ì": "i", "í": "i", "î": "i", "ï": "i",
    "ò": "o", "ó": "o", "ô": "o", "õ": "o", "ö": "o",
    "ù": "u", "ú": "u", "û": "u", "ü": "u",
    "ñ": "n", "ç": "c", "ý": "y", "ÿ": "y",
    "À": "A", "Á": "A", "Â": "A", "Ã": "A", "Ä": "A", "Å": "A",
    "È": "E", "É": "E", "Ê": "E", "Ë": "E",
    "Ì": "I", "Í": "I", "Î": "I", "Ï": "I",
    "Ò": "O", "Ó": "O", "Ô": "O", "Õ": "O", "Ö": "O",
    "Ù": "U", "Ú": "U", "Û": "U", "Ü": "U",
    "Ñ": "N", "Ç": "C", "Ý": "Y",
})


def fold_accents(text: str) -> str:
    """Map accented Latin letters to their base letter, preserving case."""
    text = unicodedata.normalize("NFD", text)
    text = _COMBINING_MARKS.sub("", text)
    return text.translate(_ACCENT_TABLE)


def strip_article(text: str) -> str:
    """Lowercase, trim and drop at most one leading article.

    An article only counts when followed by whitespace or when it is the
    whole string. Elided forms (``l'``, ``de l'``) glued to the next word
    are handled last, since they have no separator.
    """
    normalized = text.strip().lower().translate(_APOSTROPHES)

    for article in _ARTICLES_LONGEST_FIRST:
        if normalized == article:
            return ""
        if normalized.startswith(article):
            rest = normalized[len(article):]
            if rest[:1].isspace():
                return rest.strip()

    for article in _ELIDED_ARTICLES:
        if normalized.startswith(article):
            return normalized[len(article):].strip()

    return normalized


def split_variants(answer: str) -> list[str]:
    """Split a field like ``"maison / casa"`` into its trimmed alternatives."""
    return [part.strip() for part in answer.split("/")]


def single_answer_matches(user_answer: str, correct_answer: str) -> bool:
    """Compare one answer against one variant, from strict to lenient."""
    user = user_answer.strip().lower().translate(_APOSTROPHES)
    correct = correct_answer.strip().lower().translate(_APOSTROPHES)

    if not correct:
        return False

    if user == correct:
        return True

    if fold_accents(user) == fold_accents(correct):
        return True

    user_bare = strip_article(user_answer)
    correct_bare = strip_article(correct_answer)
    if user_bare == correct_bare:
        return True

    return fold_accents(user_bare) == fold_accents(correct_bare)


def answers_match(user_answer: str, correct_answer: str) -> bool:
    """Check a typed answer against every ``/``-separated variant."""
    return any(
        single_answer_matches(user_answer, variant)
        for variant in split_variants(correct_answer)
    )
