"""
Read and write service documents.

Every write replaces the whole document of a date: there is no field-level
update and no locking beyond the current transaction, the last write wins.
Edits of the order of worship therefore go through ``save_order``, which
reconciles the new order with the stored one right before writing it.
"""
import logging
import threading
from dataclasses import replace
from typing import Any, Callable, Iterable, NamedTuple

from django.conf import settings
from django.db import close_old_connections, transaction

from .elements import ReadingElement, SongElement, SongSelection, as_element, with_selection
from .exceptions import ElementNotFound, InvalidElement, ServiceNotFound
from .models import OrphanedSongs, ServiceDetails
from .parser import parse_order
from .reconciler import OrphanedSong, find_orphans, orphan_warning, reconcile
from .utils import service_date_key

logger = logging.getLogger(__name__)


class SaveResult(NamedTuple):
    service: ServiceDetails
    orphan_warning: dict[str, Any] | None


def get_service(date) -> ServiceDetails | None:
    return ServiceDetails.objects.filter(date=service_date_key(date)).first()


def _load(date, for_update=False) -> ServiceDetails:
    key = service_date_key(date)
    queryset = ServiceDetails.objects.select_for_update() if for_update else ServiceDetails.objects
    try:
        return queryset.get(date=key)
    except ServiceDetails.DoesNotExist:
        raise ServiceNotFound(key) from None


def save_service(date, type: str, content: str, elements: Iterable, setting: str | None = None) -> ServiceDetails:
    """Replace the document of ``date`` (creating it if needed)."""
    key = service_date_key(date)
    defaults = {
        "type": type or "",
        "content": content or "",
        "elements": [as_element(element).to_dict() for element in elements],
    }
    if setting is not None:
        defaults["setting"] = setting
    service, created = ServiceDetails.objects.update_or_create(date=key, defaults=defaults)
    logger.info("%s service details for %s (%d elements)", "Created" if created else "Replaced", key, len(service.elements))
    return service


def backup_orphans(date, orphans: list[OrphanedSong], original_count: int, new_count: int) -> OrphanedSongs:
    return OrphanedSongs.objects.create(
        date=service_date_key(date),
        songs=[orphan.to_dict() for orphan in orphans],
        original_element_count=original_count,
        new_element_count=new_count,
    )


def save_order(date, type: str, content: str, setting: str | None = None) -> SaveResult:
    """
    Save a new order of worship for ``date``, keeping the work already done on it.

    The stored document is read in the same transaction, the order is parsed
    against its elements, reconciled with them, and the result replaces the
    document. Song selections that could not be kept are backed up in
    ``OrphanedSongs`` and reported in the returned warning.
    """
    key = service_date_key(date)
    with transaction.atomic():
        current = ServiceDetails.objects.select_for_update().filter(date=key).first()
        prior = current.elements if current is not None else []

        merged = reconcile(parse_order(content, prior, date=key), prior)
        orphans = find_orphans(merged, prior)
        if orphans:
            backup_orphans(key, orphans, len(prior), len(merged))
            logger.warning(
                "Saving the order of %s drops %d song selection(s): %s",
                key,
                len(orphans),
                ", ".join(orphan.title for orphan in orphans),
            )

        service = save_service(key, type, content, merged, setting)
    return SaveResult(service, orphan_warning(orphans))


def clear_service(date) -> ServiceDetails:
    """Empty the document of ``date``. The date itself is kept."""
    with transaction.atomic():
        service = _load(date, for_update=True)
        return save_service(service.date, "", "", [], service.setting)


def _edit_element(date, element_id: str, edit: Callable) -> ServiceDetails:
    with transaction.atomic():
        service = _load(date, for_update=True)
        elements = service.get_elements()
        for index, element in enumerate(elements):
            if element.id == element_id:
                elements[index] = edit(element)
                break
        else:
            raise ElementNotFound(service.date, element_id)
        return save_service(service.date, service.type, service.content, elements, service.setting)


def select_song(date, element_id: str, selection: SongSelection | dict | None) -> ServiceDetails:
    """Set (or clear, with None) the song chosen for a song element."""
    if selection is not None:
        selection = SongSelection.from_dict(selection)
        if selection is None or not selection.title:
            raise InvalidElement("A song selection needs a title")

    def edit(element):
        if not isinstance(element, SongElement):
            raise InvalidElement(f"Element {element.id!r} is a {element.type} element, not a song")
        return with_selection(element, selection)

    service = _edit_element(date, element_id, edit)
    logger.info("Song for %s on %s: %s", element_id, service.date, selection.title if selection else "cleared")
    return service


def set_reference(date, element_id: str, reference: str) -> ServiceDetails:
    """Set the scripture reference (or sermon title) of a reading or message element."""

    def edit(element):
        if not isinstance(element, ReadingElement):
            raise InvalidElement(f"Element {element.id!r} is a {element.type} element, not a reading")
        return replace(element, reference=reference.strip())

    return _edit_element(date, element_id, edit)


def latest_orphans(date) -> OrphanedSongs | None:
    return OrphanedSongs.objects.filter(date=service_date_key(date)).first()


class DebouncedSave:
    """
    Delay a save until no other save was requested for a while.

    Each editor owns its handle: scheduling a save replaces the pending one
    and restarts the delay, ``flush`` runs the pending save right away and
    ``cancel`` drops it.
    """

    def __init__(self, save: Callable = save_order, delay: float | None = None):
        self.save = save
        self.delay = settings.WORSHIP_SAVE_DEBOUNCE if delay is None else delay
        self._pending = None
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()

    @property
    def pending(self):
        return self._pending is not None

    def schedule(self, *args, **kwargs):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._pending = (args, kwargs)
            self._timer = threading.Timer(self.delay, self._run)
            self._timer.daemon = True
            self._timer.start()

    def flush(self):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            pending, self._pending = self._pending, None
        if pending is None:
            return None
        args, kwargs = pending
        return self.save(*args, **kwargs)

    def _run(self):
        # runs on the timer thread: nobody is there to receive an exception
        try:
            self.flush()
        except Exception:
            logger.exception("Debounced save failed")
        finally:
            close_old_connections()

    def cancel(self):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending = None
