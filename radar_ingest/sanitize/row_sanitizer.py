from __future__ import annotations

from collections.abc import Mapping, Sequence

from bs4 import BeautifulSoup

from radar_ingest.models.blip_record import CanonicalBlipRecord

"""Row sanitizing: RawRow -> CanonicalBlipRecord.

- name / ring / quadrant / status / topic / isNew: all markup removed, trimmed
- description: a small set of formatting tags is kept; script/style blocks,
  event-handler attributes, javascript: links and every other tag are removed
  (text of removed tags is kept, escaped)
- isNew: "true" in any letter case is True, anything else False

Markup is parsed with BeautifulSoup ("html.parser"). Both variants are pure
functions of their input, and sanitizing a sanitized value returns it
unchanged.
"""

__all__ = [
    "RowSanitizer",
    "parse_is_new",
]

ALLOWED_DESCRIPTION_TAGS = frozenset(
    {"b", "i", "em", "strong", "a", "p", "br", "ul", "ol", "li", "code", "pre", "blockquote", "h1", "h2", "h3"}
)
DROPPED_TAGS = ("script", "style")
MAX_PASSES = 8

FIELDS = ("name", "ring", "quadrant", "isNew", "status", "topic", "description")


def _parse(value: str) -> BeautifulSoup:
    soup = BeautifulSoup(value, "html.parser")
    for tag in soup.find_all(DROPPED_TAGS):
        tag.decompose()
    return soup


def _strip_all_tags(value: str) -> str:
    # text of one pass may parse as markup again ("<<b>b>"), so repeat until stable
    for _ in range(MAX_PASSES):
        cleaned = _parse(value).get_text()
        if cleaned == value:
            return cleaned
        value = cleaned
    return value.replace("<", "").replace(">", "")


def _is_javascript_href(value: object) -> bool:
    return "".join(str(value).split()).lower().startswith("javascript:")


def _clean_description_once(value: str) -> str:
    soup = _parse(value)
    for tag in soup.find_all(True):
        if tag.name.lower() not in ALLOWED_DESCRIPTION_TAGS:
            tag.unwrap()
            continue
        for attr in list(tag.attrs):
            if attr.lower().startswith("on") or (attr.lower() == "href" and _is_javascript_href(tag[attr])):
                del tag[attr]
    return str(soup)


def _escaped_text(value: str) -> str:
    soup = BeautifulSoup("", "html.parser")
    soup.append(_strip_all_tags(value))
    return str(soup)


def _clean_description(value: str) -> str:
    for _ in range(MAX_PASSES):
        cleaned = _clean_description_once(value)
        if cleaned == value:
            return cleaned
        value = cleaned
    # no fixed point: keep the text only
    return _escaped_text(value)


def _text(value: object) -> str:
    if value is None:
        return ""
    return str(value)


def parse_is_new(value: object) -> bool:
    return _text(value).strip().lower() == "true"


class RowSanitizer:
    """Converts one raw tabular record into a CanonicalBlipRecord."""

    def sanitize(self, raw_row: Mapping[str, object]) -> CanonicalBlipRecord:
        # header cells may carry stray whitespace; ContentValidator trims them too
        row = {str(k).strip(): v for k, v in raw_row.items()}
        return self._build(row)

    def sanitize_for_protected_sheet(
        self, raw_row: Sequence[object], header_row: Sequence[object]
    ) -> CanonicalBlipRecord:
        """Header-relative variant for Sheets API values (rows are plain lists).

        Each field is looked up by its position in ``header_row``; cells past
        the end of a short row are empty.
        """
        header = [str(h).strip() for h in header_row]
        row: dict[str, object] = {}
        for field_name in FIELDS:
            if field_name in header:
                idx = header.index(field_name)
                row[field_name] = raw_row[idx] if idx < len(raw_row) else ""
        return self._build(row)

    def _build(self, row: Mapping[str, object]) -> CanonicalBlipRecord:
        return CanonicalBlipRecord(
            name=_strip_all_tags(_text(row.get("name"))).strip(),
            ring=_strip_all_tags(_text(row.get("ring"))).strip(),
            is_new=parse_is_new(_strip_all_tags(_text(row.get("isNew")))),
            status=_strip_all_tags(_text(row.get("status"))).strip(),
            quadrant=_strip_all_tags(_text(row.get("quadrant"))).strip(),
            topic=_strip_all_tags(_text(row.get("topic"))).strip(),
            description=_clean_description(_text(row.get("description"))),
        )
