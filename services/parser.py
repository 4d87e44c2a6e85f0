"""
Parse a free-text order of worship into service elements.
"""
import logging
import re
from dataclasses import replace
from typing import Iterable

from .classifier import classify, classify_with_suggestion
from .elements import LITURGY, ServiceElement, as_element, build_element

logger = logging.getLogger(__name__)

MAX_SLUG_LENGTH = 40


def split_lines(raw_text: str | None) -> list[str]:
    """Return the stripped, non-empty lines of a text."""
    if not raw_text:
        return []
    return [line.strip() for line in raw_text.splitlines() if line.strip()]


def make_element_id(date: str, element_type: str, content: str) -> str:
    date_slug = re.sub(r"[^0-9]+", "-", date or "").strip("-")
    content_slug = re.sub(r"[^a-z0-9]", "", content.lower())[:MAX_SLUG_LENGTH]
    return "_".join(part for part in (date_slug, element_type, content_slug) if part)


def unique_id(candidate: str, used: set[str]) -> str:
    """Append ``_2``, ``_3``... to ``candidate`` until it is not in ``used``."""
    if candidate not in used:
        return candidate
    n = 2
    while f"{candidate}_{n}" in used:
        n += 1
    return f"{candidate}_{n}"


def _match_existing(lines: list[str], existing: list[ServiceElement]) -> list[ServiceElement | None]:
    """
    Find, for each line, the existing element with the same content.

    Each existing element is used at most once, the first one in the list wins.
    """
    claimed = set()
    matches = []
    for line in lines:
        key = line.lower()
        for index, element in enumerate(existing):
            if index in claimed or element.content is None:
                continue
            if element.content.strip().lower() == key:
                claimed.add(index)
                matches.append(element)
                break
        else:
            matches.append(None)
    return matches


def parse_order(raw_text: str | None, existing_elements: Iterable | None = None, date: str = "") -> list[ServiceElement]:
    """
    Turn an order of worship into one element per non-empty line, in order.

    A line whose content is identical (ignoring case and surrounding spaces)
    to one of ``existing_elements`` keeps that element's id, type, selection
    and reference. Other lines are classified and get a new id derived from
    ``date``, their type and their content.
    """
    lines = split_lines(raw_text)
    existing = [as_element(element) for element in existing_elements or ()]
    matches = _match_existing(lines, existing)

    reserved = {match.id for match in matches if match is not None and match.id}
    used: set[str] = set()
    elements = []

    for line, previous in zip(lines, matches):
        if previous is not None:
            element = replace(previous, content=line)
            if element.id and element.id not in used:
                used.add(element.id)
                elements.append(element)
                continue
        else:
            element_type = classify(line)
            element = build_element(element_type, "", line, required=element_type != LITURGY)

        element_id = unique_id(make_element_id(date, element.type, line), used | reserved)
        used.add(element_id)
        elements.append(replace(element, id=element_id))

    logger.debug(
        "Parsed %d lines for %r (%d kept from the existing elements)",
        len(elements),
        date,
        sum(match is not None for match in matches),
    )
    return elements


def parse_custom_order(raw_text: str | None) -> list[ServiceElement]:
    """
    Parse the order of a custom service template.

    Uses the loose classifier: elements that look like a misspelled
    liturgical term get a ``suggestion`` (kept in the element extras).
    """
    elements = []
    used: set[str] = set()
    for line in split_lines(raw_text):
        classification = classify_with_suggestion(line)
        element_id = unique_id(make_element_id("", classification.type, line), used)
        used.add(element_id)
        elements.append(
            build_element(
                classification.type,
                element_id,
                line,
                required=classification.type != LITURGY,
                extra={"suggestion": classification.suggestion},
            )
        )
    return elements
