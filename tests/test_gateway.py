"""Tests for reading and writing service documents."""

from unittest.mock import MagicMock

import pytest

from services import gateway
from services.exceptions import ElementNotFound, InvalidDate, InvalidElement, ServiceNotFound
from services.models import OrphanedSongs, ServiceDetails

from .samples import AMAZING_GRACE, HOLY_HOLY_HOLY, SERVICE_DATE, TEN_THOUSAND_REASONS

pytestmark = pytest.mark.django_db

ORDER = "Opening Hymn:\nFirst Reading:\nHymn of the Day:\nSending Song:\nBlessing"


def element_id(service, label):
    return next(element.id for element in service.get_elements() if element.label == label)


@pytest.fixture
def service_with_picks():
    """A saved order where the worship team picked every song and the staff filled in the reading."""
    service = gateway.save_order(SERVICE_DATE, "communion", ORDER).service
    for label, selection in (
        ("Opening Hymn", HOLY_HOLY_HOLY),
        ("Hymn of the Day", AMAZING_GRACE),
        ("Sending Song", TEN_THOUSAND_REASONS),
    ):
        service = gateway.select_song(SERVICE_DATE, element_id(service, label), selection)
    return gateway.set_reference(SERVICE_DATE, element_id(service, "First Reading"), " Isaiah 6:1-8 ")


def test_save_service_replaces_the_document():
    gateway.save_service("06/01/25", "communion", "Blessing", [{"id": "b", "type": "liturgy", "content": "Blessing"}])
    gateway.save_service(SERVICE_DATE, "no_communion", "Greeting", [{"id": "g", "type": "liturgy", "content": "Greeting"}])

    service = ServiceDetails.objects.get()
    assert service.date == SERVICE_DATE
    assert service.type == "no_communion"
    assert service.elements == [{"id": "g", "type": "liturgy", "content": "Greeting", "required": False}]


def test_save_order_creates_the_document():
    result = gateway.save_order(SERVICE_DATE, "communion", ORDER, setting="1")
    assert result.orphan_warning is None
    assert result.service.content == ORDER
    assert [element["type"] for element in result.service.elements] == ["song_hymn", "reading", "song_hymn", "song_hymn", "liturgy"]


def test_picks_survive_an_edit(service_with_picks):
    edited = "Prelude\nOpening Hymn:\nFirst Reading:\nSecond Reading:\nHymn of the Day:\nSending Song:\nBlessing"
    result = gateway.save_order(SERVICE_DATE, "communion", edited)
    elements = result.service.get_elements()

    assert result.orphan_warning is None
    assert [element.content for element in elements] == [
        "Prelude",
        "Opening Hymn: Holy, Holy, Holy #138 (Cranberry)",
        "First Reading:",
        "Second Reading:",
        "Hymn of the Day: Amazing Grace #779 (Cranberry)",
        "Sending Song: 10,000 Reasons - Matt Redman",
        "Blessing",
    ]
    assert elements[2].reference == "Isaiah 6:1-8"
    assert elements[3].reference == ""
    assert result.service.content == edited


def test_ids_are_kept_across_edits(service_with_picks):
    before = {element.label: element.id for element in service_with_picks.get_elements()}
    result = gateway.save_order(SERVICE_DATE, "communion", ORDER.replace("Blessing", "Blessing\nPostlude"))
    after = {element.label: element.id for element in result.service.get_elements()}
    assert all(after[label] == element_id for label, element_id in before.items())


def test_removed_songs_are_backed_up(service_with_picks):
    result = gateway.save_order(SERVICE_DATE, "communion", "Opening Hymn:\nFirst Reading:\nSending Song:\nBlessing")

    assert result.orphan_warning["count"] == 1
    assert result.orphan_warning["songs"] == [{"title": "Amazing Grace", "position": "hymn of the day"}]
    backup = gateway.latest_orphans(SERVICE_DATE)
    assert backup.songs[0]["selection"]["title"] == "Amazing Grace"
    assert backup.original_element_count == 5
    assert backup.new_element_count == 4
    assert OrphanedSongs.objects.count() == 1


def test_latest_orphans_without_backup():
    assert gateway.latest_orphans(SERVICE_DATE) is None


def test_clear_keeps_the_date(service_with_picks):
    service = gateway.clear_service(SERVICE_DATE)
    assert service.date == SERVICE_DATE
    assert service.is_empty
    assert service.type == ""
    assert ServiceDetails.objects.filter(date=SERVICE_DATE).exists()


def test_clear_unknown_date():
    with pytest.raises(ServiceNotFound):
        gateway.clear_service("6/8/25")


def test_select_song_clears_selection(service_with_picks):
    opening = element_id(service_with_picks, "Opening Hymn")
    service = gateway.select_song(SERVICE_DATE, opening, None)
    element = next(element for element in service.get_elements() if element.id == opening)
    assert element.selection is None
    assert element.content == "Opening Hymn: "


def test_select_song_errors(service_with_picks):
    with pytest.raises(InvalidElement):
        gateway.select_song(SERVICE_DATE, element_id(service_with_picks, "First Reading"), HOLY_HOLY_HOLY)
    with pytest.raises(InvalidElement):
        gateway.select_song(SERVICE_DATE, element_id(service_with_picks, "Opening Hymn"), {"title": ""})
    with pytest.raises(ElementNotFound):
        gateway.select_song(SERVICE_DATE, "missing", HOLY_HOLY_HOLY)
    with pytest.raises(ServiceNotFound):
        gateway.select_song("6/8/25", "missing", HOLY_HOLY_HOLY)
    with pytest.raises(InvalidDate):
        gateway.select_song("June 1st", "missing", HOLY_HOLY_HOLY)


def test_set_reference_only_on_readings(service_with_picks):
    with pytest.raises(InvalidElement):
        gateway.set_reference(SERVICE_DATE, element_id(service_with_picks, "Blessing"), "John 1")


def test_debounced_save_keeps_the_last_call():
    save = MagicMock(return_value="saved")
    debounced = gateway.DebouncedSave(save, delay=60)

    debounced.schedule(SERVICE_DATE, "communion", "Opening Hymn:")
    debounced.schedule(SERVICE_DATE, "communion", "Opening Hymn:\nBlessing")
    assert debounced.pending
    assert debounced.flush() == "saved"

    save.assert_called_once_with(SERVICE_DATE, "communion", "Opening Hymn:\nBlessing")
    assert not debounced.pending
    assert debounced.flush() is None


def test_debounced_save_cancel():
    save = MagicMock()
    debounced = gateway.DebouncedSave(save, delay=60)
    debounced.schedule(SERVICE_DATE, "communion", "Blessing")
    debounced.cancel()
    assert debounced.flush() is None
    save.assert_not_called()


def test_debounced_save_failure_on_the_timer_is_logged(monkeypatch):
    closed, logger = MagicMock(), MagicMock()
    monkeypatch.setattr(gateway, "close_old_connections", closed)
    monkeypatch.setattr(gateway, "logger", logger)
    debounced = gateway.DebouncedSave(MagicMock(side_effect=ServiceNotFound(SERVICE_DATE)), delay=60)
    debounced.schedule(SERVICE_DATE, "communion", "Blessing")

    debounced._run()

    logger.exception.assert_called_once_with("Debounced save failed")
    assert not debounced.pending
    closed.assert_called_once_with()


def test_debounced_handles_are_independent(settings):
    settings.WORSHIP_SAVE_DEBOUNCE = 30
    first, second = gateway.DebouncedSave(MagicMock()), gateway.DebouncedSave(MagicMock())
    assert first.delay == 30
    first.schedule("a")
    assert first.pending
    assert not second.pending
    first.cancel()
