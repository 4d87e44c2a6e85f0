"""Tests for the line classifier and its fuzzy suggestion variant."""

import pytest

from services.classifier import Classification, classify, classify_with_suggestion, find_closest_match, VOCABULARY


@pytest.mark.parametrize(
    "line, expected",
    [
        ("Opening Hymn:", "song_hymn"),
        ("Hymn of the Day: ", "song_hymn"),
        ("Sending Song:", "song_hymn"),
        ("Anthem: Choir", "song_hymn"),
        ("Special Song: Youth Group", "song_hymn"),
        ("First Reading: Isaiah 6:1-8", "reading"),
        ("Old Testament Lesson: Genesis 1", "reading"),
        ("Psalm: 23", "reading"),
        ("Gospel: John 3:16", "reading"),
        ("Sermon: Here I Am", "message"),
        ("Message: Guest Speaker", "message"),
        ("Kyrie & Hymn of Praise", "liturgical_song"),
        ("Gospel Acclamation - Alleluia (pg. 102)", "liturgical_song"),
        ('Offering & Offertory - "Create In Me" (#186)', "liturgical_song"),
        ('Communion Preparation Hymn - "Change My Heart O God" (#801 Cranberry)', "liturgical_song"),
        ("Lamb of God", "liturgical_song"),
        ("Blessing", "liturgy"),
        ("Prayers of the Church", "liturgy"),
        ("", "liturgy"),
    ],
)
def test_classify(line, expected):
    assert classify(line) == expected


def test_classify_is_case_insensitive():
    assert classify("OPENING HYMN:") == "song_hymn"
    assert classify("first reading:") == "reading"


def test_childrens_message_is_liturgy():
    assert classify("Children's Message") == "liturgy"
    assert classify("Children's Message: message: Jesus Loves Me") == "liturgy"


def test_priority_order():
    # a song marker wins over a reading marker or a liturgical song
    assert classify("Song: Alleluia") == "song_hymn"
    assert classify("Psalm: Kyrie") == "reading"
    assert classify("Hymn: Psalm: 23") == "song_hymn"
    assert classify("Sermon: Lamb of God") == "message"


def test_suggestion_for_misspelled_single_word():
    result = classify_with_suggestion("Kyre")
    assert result.type == "liturgical_song"
    assert result.suggestion == "Kyrie"
    assert result.rating > 0.6


def test_suggestion_for_misspelled_phrase():
    result = classify_with_suggestion("Prayer of the Dya")
    assert result.type == "liturgy"
    assert result.suggestion == "Prayer of the Day"
    assert result.rating > 0.8


def test_no_suggestion_for_known_terms():
    assert classify_with_suggestion("Prayer of the Day") == Classification("liturgy")
    assert classify_with_suggestion("First Reading") == Classification("reading")
    assert classify_with_suggestion("Gospel Acclamation") == Classification("liturgical_song")
    assert classify_with_suggestion("Sermon: Title") == Classification("message")


def test_no_suggestion_for_unrelated_lines():
    assert classify_with_suggestion("Potluck Lunch in the Fellowship Hall").suggestion is None
    assert classify_with_suggestion("Children's Message").suggestion is None


def test_find_closest_match_skips_exact_terms():
    assert find_closest_match("The Blessing", VOCABULARY["liturgy"]) is None
    assert find_closest_match("   ", VOCABULARY["liturgy"]) is None
    assert find_closest_match("Blesing", VOCABULARY["liturgy"])[0] == "Blessing"
