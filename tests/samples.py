"""Song selections shared by the tests."""

# The first Sunday of June 2025
SERVICE_DATE = "6/1/25"

HOLY_HOLY_HOLY = {"type": "hymn", "title": "Holy, Holy, Holy", "number": "138", "hymnal": "cranberry"}
AMAZING_GRACE = {"type": "hymn", "title": "Amazing Grace", "number": "779", "hymnal": "cranberry"}
TEN_THOUSAND_REASONS = {"type": "contemporary", "title": "10,000 Reasons", "author": "Matt Redman"}
