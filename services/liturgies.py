"""
Built-in orders of worship, used to seed a service the first time it is edited.
"""
import datetime as dt
from string import Template

from .utils import is_sunday, parse_service_date, sunday_of_month

SERVICE_TYPES = {
    "no_communion": "No Communion",
    "communion": "Communion",
    "communion_potluck": "Communion with Potluck",
}

SETTINGS = ("1", "3")

_GATHERING = """\
Prelude & Lighting of Candles
Welcome & Announcements
Opening Hymn:
Confession and Forgiveness (pg. 94-96)
Greeting
Kyrie & Hymn of Praise
Prayer of the Day
Children's Message
First Reading:
Psalm Reading:
Second Reading:
Gospel Acclamation - Alleluia (pg. 102)
Gospel Reading:
Sermon:
Hymn of the Day:
The Apostle's Creed
Prayers of the Church
Sharing of the Peace
Offering & Offertory - "Create In Me" (#186)
Offering Prayer
"""

_MEAL = """\
Words of Institution
$lords_prayer
Communion Preparation Hymn - "Change My Heart O God" (#801 Cranberry)
Distribution of Communion
"""

_SENDING = """\
Blessing
Sending Song:
Dismissal
Postlude"""

_POTLUCK_SENDING = """\
Blessing
Sending Song:
Table Prayer
Dismissal
Postlude"""

TEMPLATES = {
    "1": {
        "no_communion": Template(_GATHERING + _SENDING),
        "communion": Template(_GATHERING + _MEAL + _SENDING),
        "communion_potluck": Template(_GATHERING + _MEAL + _POTLUCK_SENDING),
    },
    # no built-in orders: setting 3 services start from a custom service
    "3": {},
}


def default_service_type(value: str | dt.date) -> str:
    """Communion on the first Sunday, communion and potluck on the third one."""
    date = parse_service_date(value)
    if not is_sunday(date):
        return "no_communion"
    sunday = sunday_of_month(date)
    if sunday == 1:
        return "communion"
    if sunday == 3:
        return "communion_potluck"
    return "no_communion"


def lords_prayer(value: str | dt.date) -> str:
    if sunday_of_month(parse_service_date(value)) == 1:
        return "The Lord's Prayer-Sung"
    return "The Lord's Prayer"


def get_template(service_type: str, date: str | dt.date, setting: str = "1") -> str | None:
    """Return the order of worship for a service type, or None if there is no such template."""
    template = TEMPLATES.get(setting, {}).get(service_type)
    if template is None:
        return None
    return template.substitute(lords_prayer=lords_prayer(date))
