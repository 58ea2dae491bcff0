"""Text formats applied to rich text fields on output.

Each format names the markup a stored value may keep when rendered. The
actual filtering is done by nh3; this module only holds the allow lists.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import nh3

from event_app.services.error_codes import ErrorCode
from event_app.services.exceptions import ValidationError


@dataclass(frozen=True)
class TextFormat:
    id: str
    label: str
    tags: frozenset[str] = frozenset()
    attributes: dict[str, frozenset[str]] = field(default_factory=dict)
    escape: bool = False
    weight: int = 0

    def apply(self, text: str) -> str:
        if self.escape:
            # Escape everything, keep line breaks visible.
            lines = text.replace("\r\n", "\n").split("\n")
            return "<br>\n".join(nh3.clean_text(line) for line in lines)
        return nh3.clean(
            text,
            tags=set(self.tags),
            attributes={tag: set(attrs) for tag, attrs in self.attributes.items()},
            url_schemes={"http", "https", "mailto"},
        )


_LINK_ATTRS = frozenset({"href", "hreflang", "title"})
_BASIC_TAGS = frozenset(
    {
        "a", "em", "strong", "cite", "blockquote", "code", "ul", "ol", "li",
        "dl", "dt", "dd", "h2", "h3", "h4", "h5", "h6", "p", "br", "span", "img",
    }
)

PLAIN_TEXT = TextFormat(id="plain_text", label="Plain text", escape=True, weight=10)

RESTRICTED_HTML = TextFormat(
    id="restricted_html",
    label="Restricted HTML",
    tags=frozenset(
        {"a", "em", "strong", "cite", "blockquote", "code", "ul", "ol", "li", "dl", "dt", "dd", "p", "br"}
    ),
    attributes={"a": _LINK_ATTRS},
    weight=1,
)

BASIC_HTML = TextFormat(
    id="basic_html",
    label="Basic HTML",
    tags=_BASIC_TAGS,
    attributes={
        "a": _LINK_ATTRS,
        "img": frozenset({"src", "alt", "width", "height"}),
        "blockquote": frozenset({"cite"}),
    },
    weight=0,
)

# Broad, but never script, style, iframe, object or event handler attributes.
FULL_HTML = TextFormat(
    id="full_html",
    label="Full HTML",
    tags=_BASIC_TAGS
    | frozenset(
        {
            "h1", "b", "i", "u", "s", "sub", "sup", "small", "mark", "pre", "hr",
            "div", "section", "article", "figure", "figcaption", "caption",
            "table", "thead", "tbody", "tfoot", "tr", "th", "td",
        }
    ),
    attributes={
        "*": frozenset({"class", "id", "lang", "dir", "title"}),
        "a": _LINK_ATTRS,
        "img": frozenset({"src", "alt", "width", "height"}),
        "blockquote": frozenset({"cite"}),
        "td": frozenset({"colspan", "rowspan"}),
        "th": frozenset({"colspan", "rowspan", "scope"}),
    },
    weight=2,
)

_FORMATS: dict[str, TextFormat] = {
    fmt.id: fmt for fmt in (BASIC_HTML, RESTRICTED_HTML, FULL_HTML, PLAIN_TEXT)
}


def available_formats() -> list[TextFormat]:
    return sorted(_FORMATS.values(), key=lambda fmt: (fmt.weight, fmt.id))


def get_format(format_id: str) -> TextFormat:
    fmt = _FORMATS.get(format_id)
    if fmt is None:
        raise ValidationError(
            ErrorCode.UNKNOWN_TEXT_FORMAT.value,
            f"unknown text format: {format_id}",
            violations=[f"description.format: unknown text format {format_id!r}"],
        )
    return fmt


def check_markup(text: str | None, format_id: str | None) -> str:
    """Render ``text`` through the given format.

    A missing format falls back to plain text so stored values of unknown
    origin are never output unescaped.
    """
    if not text:
        return ""
    fmt = _FORMATS.get(format_id or "", PLAIN_TEXT)
    return fmt.apply(text)
