"""
Merge an edited order of worship with the elements stored before the edit.

Saving an order replaces the whole document, so without this step a pastor
editing the order would erase the songs already chosen by the worship team
and the references already filled in by the staff.

A slot of the new order corresponds to a slot of the previous one when
their labels (the text before the first colon) are equal, ignoring case.
Songs whose label changed can still be matched by their position among the
song elements. A previous element is matched by at most one new element.
A new song that already holds a selection (the parser kept its line
verbatim) keeps the previous element with its own id, even when lines
sharing a label were reordered. Then label matches are resolved, in order,
each taking the first unclaimed
previous element with that label; the position fallback only considers
previous songs that were not claimed by a label.
"""
import logging
from dataclasses import dataclass, replace
from typing import Any, Iterable

from .elements import ReadingElement, ServiceElement, SongElement, SongSelection, as_element, with_selection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrphanedSong:
    """A song selection that did not survive an edit of the order."""

    title: str
    original_prefix: str
    selection: SongSelection
    original_content: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "originalPrefix": self.original_prefix,
            "selection": self.selection.to_dict(),
            "originalContent": self.original_content,
        }


def _prior_songs(elements: list[ServiceElement]) -> list[SongElement]:
    return [element for element in elements if isinstance(element, SongElement) and element.has_selection]


def _prior_readings(elements: list[ServiceElement]) -> list[ReadingElement]:
    return [element for element in elements if isinstance(element, ReadingElement) and element.has_reference]


def _first_unclaimed(prefix: str, candidates: list, claimed: set[int]) -> int | None:
    for index, candidate in enumerate(candidates):
        if index not in claimed and candidate.prefix == prefix:
            return index
    return None


def match_songs(elements: list[ServiceElement], prior_songs: list[SongElement]) -> dict[int, SongElement]:
    """Return the previous song matched by each song of ``elements``, keyed by its index."""
    positions = [index for index, element in enumerate(elements) if isinstance(element, SongElement)]
    matches = {}
    claimed: set[int] = set()

    # lines kept verbatim by the parser already carry their own song
    for index in positions:
        element = elements[index]
        if not element.has_selection or not element.id:
            continue
        for found, candidate in enumerate(prior_songs):
            if found not in claimed and candidate.id == element.id:
                claimed.add(found)
                matches[index] = candidate
                break

    for index in positions:
        if index in matches:
            continue
        prefix = elements[index].prefix
        if prefix is None:
            continue
        found = _first_unclaimed(prefix, prior_songs, claimed)
        if found is not None:
            claimed.add(found)
            matches[index] = prior_songs[found]

    for ordinal, index in enumerate(positions):
        if index in matches or elements[index].prefix is None:
            continue
        if ordinal < len(prior_songs) and ordinal not in claimed:
            claimed.add(ordinal)
            matches[index] = prior_songs[ordinal]
            logger.debug("Matched %r to %r by position", elements[index].content, prior_songs[ordinal].content)

    return matches


def reconcile(new_elements: Iterable, prior_elements: Iterable | None) -> list[ServiceElement]:
    """
    Return ``new_elements`` enriched with the selections and references of ``prior_elements``.

    The result has the same elements in the same order. Matched songs get the
    previous selection (their content is rewritten to show it, and they take
    the previous id when it is free); matched readings get the previous
    reference unless the new element already has one. Elements without
    content are left untouched.
    """
    new = [as_element(element) for element in new_elements]
    prior = [as_element(element) for element in prior_elements or ()]

    prior_songs = _prior_songs(prior)
    prior_readings = _prior_readings(prior)
    song_matches = match_songs(new, prior_songs)

    ids_in_use = {element.id for element in new if element.id}
    claimed_readings: set[int] = set()
    merged = []

    for index, element in enumerate(new):
        if isinstance(element, SongElement) and index in song_matches:
            match = song_matches[index]
            element = with_selection(element, match.selection)
            if match.id and match.id != element.id and match.id not in ids_in_use:
                ids_in_use.add(match.id)
                element = replace(element, id=match.id)

        elif isinstance(element, ReadingElement) and element.prefix is not None:
            found = _first_unclaimed(element.prefix, prior_readings, claimed_readings)
            if found is not None:
                claimed_readings.add(found)
                if not element.has_reference:
                    element = replace(element, reference=prior_readings[found].reference)

        merged.append(element)

    logger.debug("Reconciled %d elements: %d songs kept", len(merged), len(song_matches))
    return merged


def find_orphans(merged_elements: Iterable, prior_elements: Iterable | None) -> list[OrphanedSong]:
    """Return the previous song selections that are not in ``merged_elements`` any more."""
    surviving = [
        element.selection
        for element in map(as_element, merged_elements)
        if isinstance(element, SongElement) and element.has_selection
    ]
    orphans = []
    for element in _prior_songs([as_element(element) for element in prior_elements or ()]):
        if element.selection in surviving:
            surviving.remove(element.selection)
            continue
        orphans.append(
            OrphanedSong(
                title=element.selection.title,
                original_prefix=element.prefix or "",
                selection=element.selection,
                original_content=element.content,
            )
        )
    return orphans


def orphan_warning(orphans: list[OrphanedSong]) -> dict[str, Any] | None:
    if not orphans:
        return None
    titles = ", ".join(orphan.title for orphan in orphans)
    return {
        "count": len(orphans),
        "songs": [{"title": orphan.title, "position": orphan.original_prefix} for orphan in orphans],
        "message": f"Warning: {len(orphans)} song selection(s) will be removed: {titles}",
    }
