"""
Classify the lines of an order of worship.

``classify`` is the authoritative classifier used whenever an order is saved.
``classify_with_suggestion`` is the looser variant used when importing a
custom service: it also proposes a corrected label for lines that look like
a misspelled liturgical term, for a human to accept or ignore.
"""
from difflib import SequenceMatcher
from typing import NamedTuple

from .elements import LITURGICAL_SONG, LITURGY, MESSAGE, READING, SONG_HYMN

# Evaluated in this order, the first match wins
RULES = (
    (SONG_HYMN, ("hymn:", "hymn of the day", "opening hymn", "sending song", "anthem:", "song:")),
    (READING, ("reading:", "lesson:", "psalm:", "gospel:")),
    (MESSAGE, ("sermon:", "message:")),
    (
        LITURGICAL_SONG,
        ("kyrie", "alleluia", "create in me", "lamb of god", "this is the feast", "glory to god", "change my heart"),
    ),
)

VOCABULARY = {
    "songs": (
        "Kyrie",
        "Alleluia",
        "Gospel Acclamation",
        "Canticle",
        "Create in Me",
        "Change My Heart O God",
        "Lamb of God",
        "Glory to God",
        "This is the Feast",
        "Hymn of the Day",
        "Opening Hymn",
        "Sending Song",
    ),
    "readings": (
        "First Reading",
        "Second Reading",
        "Gospel Reading",
        "Psalm Reading",
    ),
    "liturgy": (
        "Confession and Forgiveness",
        "Apostle's Creed",
        "Prayer of the Day",
        "Blessing",
        "Peace",
        "Offering",
        "Communion",
        "Distribution",
        "Prelude",
        "Postlude",
        "Dismissal",
        "Greeting",
        "Announcements",
    ),
}

# vocabulary to try for suggestions and the type a suggestion implies
SUGGESTION_ORDER = (
    ("songs", LITURGICAL_SONG),
    ("readings", READING),
    ("liturgy", LITURGY),
)

SINGLE_WORD_THRESHOLD = 0.6
MULTI_WORD_THRESHOLD = 0.8


class Classification(NamedTuple):
    type: str
    suggestion: str | None = None
    rating: float = 0.0


def is_childrens_message(line: str):
    lowered = line.lower()
    return "children" in lowered and "message" in lowered


def classify(line: str) -> str:
    """Return the element type of a line of an order of worship."""
    lowered = line.strip().lower()
    # "Children's Message" would otherwise be taken for a sermon
    if is_childrens_message(lowered):
        return LITURGY
    for element_type, markers in RULES:
        if any(marker in lowered for marker in markers):
            return element_type
    return LITURGY


def similarity(first: str, second: str) -> float:
    return SequenceMatcher(None, first.lower(), second.lower()).ratio()


def contains_term(line: str, vocabulary) -> bool:
    lowered = line.lower()
    return any(term.lower() in lowered for term in vocabulary)


def find_closest_match(line: str, vocabulary) -> tuple[str, float] | None:
    """
    Return the vocabulary term closest to ``line`` and its similarity rating.

    Returns None when the line already contains a term of the vocabulary or
    when no term is similar enough. Multi-word lines need a higher rating.
    """
    line = line.strip()
    if not line or contains_term(line, vocabulary):
        return None
    term, rating = max(((term, similarity(line, term)) for term in vocabulary), key=lambda item: item[1])
    threshold = MULTI_WORD_THRESHOLD if " " in line else SINGLE_WORD_THRESHOLD
    if rating > threshold:
        return term, rating
    return None


def classify_with_suggestion(line: str) -> Classification:
    """Classify a line and propose a correction if it looks like a misspelled term."""
    element_type = classify(line)
    if element_type != LITURGY or is_childrens_message(line):
        return Classification(element_type)
    # labels without a colon ("First Reading") are still recognized here
    for category, category_type in SUGGESTION_ORDER:
        if contains_term(line, VOCABULARY[category]):
            return Classification(category_type)

    for category, suggested_type in SUGGESTION_ORDER:
        match = find_closest_match(line, VOCABULARY[category])
        if match is not None:
            return Classification(suggested_type, *match)
    return Classification(element_type)
