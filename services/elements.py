"""
Service elements: the typed lines of an order of worship.

An element is one of three variants chosen from its ``type``:

* ``SongElement`` for ``song_hymn`` / ``song_contemporary``, which may carry a ``selection``
* ``ReadingElement`` for ``reading`` / ``message``, which may carry a ``reference``
* ``LiturgyElement`` for everything else

Elements are stored as plain dicts (camelCase keys, like the documents the
front end reads), so every variant knows how to convert itself from and to a dict.
"""
from dataclasses import dataclass, field, replace
from typing import Any

LITURGY = "liturgy"
SONG_HYMN = "song_hymn"
SONG_CONTEMPORARY = "song_contemporary"
LITURGICAL_SONG = "liturgical_song"
READING = "reading"
MESSAGE = "message"

ELEMENT_TYPES = (LITURGY, SONG_HYMN, SONG_CONTEMPORARY, LITURGICAL_SONG, READING, MESSAGE)
SONG_TYPES = (SONG_HYMN, SONG_CONTEMPORARY)
READING_TYPES = (READING, MESSAGE)

# keys handled by the element classes, everything else is kept in ``extra``
_KNOWN_KEYS = {"id", "type", "content", "required", "selection", "reference"}


def label_of(content: str | None) -> str | None:
    """Return the label of a content line (the text before the first colon), or None for an empty line."""
    if not isinstance(content, str) or not content.strip():
        return None
    return content.split(":", 1)[0].strip()


def prefix_of(content: str | None) -> str | None:
    """Return the lower-cased label used to compare slots across versions of a document."""
    label = label_of(content)
    return label.lower() if label is not None else None


@dataclass(frozen=True)
class SongSelection:
    """The concrete song chosen for a song slot."""

    title: str
    type: str = "hymn"
    number: str | None = None
    hymnal: str | None = None
    author: str | None = None
    sheet_music: str | None = None
    youtube: str | None = None
    notes: str | None = None

    @classmethod
    def from_dict(cls, data) -> "SongSelection | None":
        if isinstance(data, cls):
            return data
        if not isinstance(data, dict):
            return None

        def text(key):
            value = data.get(key)
            if value is None or value == "":
                return None
            return str(value)

        return cls(
            title=str(data.get("title") or "").strip(),
            type=data.get("type") or "hymn",
            number=text("number"),
            hymnal=text("hymnal"),
            author=text("author"),
            sheet_music=text("sheetMusic"),
            youtube=text("youtube"),
            notes=text("notes"),
        )

    def to_dict(self) -> dict[str, Any]:
        ret = {"type": self.type, "title": self.title}
        for key, value in (
            ("number", self.number),
            ("hymnal", self.hymnal),
            ("author", self.author),
            ("sheetMusic", self.sheet_music),
            ("youtube", self.youtube),
            ("notes", self.notes),
        ):
            if value is not None:
                ret[key] = value
        return ret

    def format_detail(self) -> str:
        """
        Return the text shown after the slot label.

        Hymns read ``Title #123 (Hymnal)``, contemporary songs ``Title - Author``.
        """
        if self.type == "hymn":
            detail = self.title
            if self.number:
                detail += f" #{self.number}"
            if self.hymnal:
                detail += f" ({self.hymnal[:1].upper() + self.hymnal[1:]})"
            return detail
        if self.author:
            return f"{self.title} - {self.author}"
        return self.title


@dataclass(frozen=True)
class ServiceElement:
    id: str
    type: str
    content: str | None
    required: bool = False
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def label(self) -> str | None:
        return label_of(self.content)

    @property
    def prefix(self) -> str | None:
        return prefix_of(self.content)

    def to_dict(self) -> dict[str, Any]:
        ret = dict(self.extra)
        ret["id"] = self.id
        ret["type"] = self.type
        if self.content is not None:
            ret["content"] = self.content
        ret["required"] = self.required
        return ret


@dataclass(frozen=True)
class LiturgyElement(ServiceElement):
    pass


@dataclass(frozen=True)
class SongElement(ServiceElement):
    selection: SongSelection | None = None

    @property
    def has_selection(self):
        return self.selection is not None and bool(self.selection.title)

    def to_dict(self):
        ret = super().to_dict()
        ret["selection"] = self.selection.to_dict() if self.selection else None
        return ret


@dataclass(frozen=True)
class ReadingElement(ServiceElement):
    reference: str = ""

    @property
    def has_reference(self):
        return bool(self.reference.strip())

    def to_dict(self):
        ret = super().to_dict()
        ret["reference"] = self.reference
        return ret


def build_element(element_type: str, element_id: str, content: str | None, **kwargs) -> ServiceElement:
    """Create the element variant matching ``element_type``."""
    if element_type not in ELEMENT_TYPES:
        element_type = LITURGY
    if element_type in SONG_TYPES:
        kwargs.pop("reference", None)
        return SongElement(element_id, element_type, content, **kwargs)
    kwargs.pop("selection", None)
    if element_type in READING_TYPES:
        return ReadingElement(element_id, element_type, content, **kwargs)
    kwargs.pop("reference", None)
    return LiturgyElement(element_id, element_type, content, **kwargs)


def element_from_dict(data: dict[str, Any]) -> ServiceElement:
    """
    Convert a stored element dict into an element.

    The conversion never fails: unknown types become ``liturgy``, non-string
    content is treated as missing, and a selection (or reference) is dropped
    when the element type cannot carry one.
    """
    content = data.get("content")
    if not isinstance(content, str):
        content = None
    reference = data.get("reference")
    return build_element(
        data.get("type"),
        str(data.get("id") or ""),
        content,
        required=bool(data.get("required", False)),
        extra={key: value for key, value in data.items() if key not in _KNOWN_KEYS},
        selection=SongSelection.from_dict(data.get("selection")),
        reference=reference if isinstance(reference, str) else "",
    )


def as_element(value) -> ServiceElement:
    if isinstance(value, ServiceElement):
        return value
    if isinstance(value, dict):
        return element_from_dict(value)
    return LiturgyElement("", LITURGY, None)


def with_selection(element: SongElement, selection: SongSelection | None) -> SongElement:
    """Attach (or clear) a selection and rewrite the content to show it."""
    label = element.label or ""
    if selection is None:
        return replace(element, selection=None, content=f"{label}: ")
    return replace(element, selection=selection, content=f"{label}: {selection.format_detail()}")
