"""Rule text parsing: ``"<Subject> + <Action>"`` into typed variants.

Rule text is persisted verbatim and decoded once, here, into tagged
variants with typed parameters. Downstream code dispatches on the variant
type instead of re-inspecting strings.

Keyword prefixes are case-insensitive. Parameters (tag names, folder
names, patterns) keep their original case.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, ClassVar

from deskctl.domain.types import SortField, TimeField, TimeMode, TimeUnit

DELIMITER = " + "

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_PUT_IN_FOLDER = re.compile(r'^put in "(?P<name>.+)" folder$', re.IGNORECASE)
_ZIP_IN_FOLDER = re.compile(r'^zip in "(?P<name>.+)" folder$', re.IGNORECASE)

_TIME_FIELDS: dict[str, TimeField] = {
    "last accessed": TimeField.LAST_ACCESSED,
    "last modified": TimeField.LAST_MODIFIED,
    "create time": TimeField.CREATED,
    "created time": TimeField.CREATED,
}

_SORT_FIELDS: dict[str, SortField] = {
    "name": SortField.NAME,
    "time": SortField.LAST_MODIFIED,
    "last modified": SortField.LAST_MODIFIED,
    "last modified time": SortField.LAST_MODIFIED,
    "last accessed": SortField.LAST_ACCESSED,
    "last accessed time": SortField.LAST_ACCESSED,
    "size": SortField.FILE_SIZE,
    "file size": SortField.FILE_SIZE,
    "type": SortField.TYPE,
}


# --- Raw split ---


@dataclass(frozen=True)
class RuleText:
    """The two raw segments of a rule."""

    subject: str
    action: str


def split_rule(text: str) -> RuleText | None:
    """Split *text* on the literal ``" + "`` delimiter.

    Returns None unless there are exactly two segments.
    """
    parts = text.split(DELIMITER)
    if len(parts) != 2:
        return None
    return RuleText(subject=parts[0].strip(), action=parts[1].strip())


def compose_rule(subject: str, action: str) -> str:
    """Inverse of :func:`split_rule`."""
    return f"{subject.strip()}{DELIMITER}{action.strip()}"


# --- Subjects ---


@dataclass(frozen=True)
class AllFiles:
    """Matches every item."""

    kind: ClassVar[str] = "all_files"


@dataclass(frozen=True)
class TagSubject:
    kind: ClassVar[str] = "tag"

    name: str


@dataclass(frozen=True)
class FileTypeSubject:
    """Extension (``txt`` / ``.txt``), item category, or ``/`` for folders."""

    kind: ClassVar[str] = "file_type"

    value: str


@dataclass(frozen=True)
class TimeSubject:
    """Timestamp predicate. Either ``on`` (a date) or ``amount``/``unit`` is set."""

    kind: ClassVar[str] = "time"

    field: TimeField
    mode: TimeMode
    on: date | None = None
    amount: int | None = None
    unit: TimeUnit | None = None


@dataclass(frozen=True)
class PatternSubject:
    """Glob over the item file name (``*`` any run, ``?`` one character)."""

    kind: ClassVar[str] = "pattern"

    pattern: str


@dataclass(frozen=True)
class UnknownSubject:
    """Unrecognized subject text. Matches nothing."""

    kind: ClassVar[str] = "unknown"

    text: str


Subject = AllFiles | TagSubject | FileTypeSubject | TimeSubject | PatternSubject | UnknownSubject


# --- Actions ---


@dataclass(frozen=True)
class SortAction:
    kind: ClassVar[str] = "sort"

    field: SortField


@dataclass(frozen=True)
class PutInFolderAction:
    kind: ClassVar[str] = "put_in_folder"

    name: str


@dataclass(frozen=True)
class DeleteAction:
    kind: ClassVar[str] = "delete"


@dataclass(frozen=True)
class ZipAction:
    """Cosmetic grouping. ``name`` adds a ``<name>.zip`` marker folder."""

    kind: ClassVar[str] = "zip"

    name: str | None = None


Action = SortAction | PutInFolderAction | DeleteAction | ZipAction


@dataclass(frozen=True)
class ParsedRule:
    """A decoded rule. ``action`` is None when the action text is unrecognized."""

    text: RuleText
    subject: Subject
    action: Action | None


# --- Decoding ---


def _strip_prefix(text: str, prefix: str) -> str | None:
    """Return the remainder of *text* after a case-insensitive *prefix*."""
    if text[: len(prefix)].casefold() == prefix.casefold():
        return text[len(prefix) :]
    return None


def decode_subject(text: str) -> Subject:
    """Decode subject text by prefix; first match wins."""
    text = text.strip()
    if _strip_prefix(text, "All files") is not None:
        return AllFiles()

    rest = _strip_prefix(text, "Tags > ")
    if rest is not None:
        return TagSubject(name=rest.strip())

    rest = _strip_prefix(text, "File Type > ")
    if rest is not None and rest.strip():
        return FileTypeSubject(value=rest.strip())

    rest = _strip_prefix(text, "Time > ")
    if rest is not None:
        return _decode_time(rest) or UnknownSubject(text=text)

    rest = _strip_prefix(text, "F-string:")
    if rest is not None and rest.strip():
        return PatternSubject(pattern=rest.strip())

    return UnknownSubject(text=text)


def _decode_time(text: str) -> TimeSubject | None:
    """Decode ``<field> <mode> <YYYY-MM-DD | amount unit>``."""
    parts = text.split()
    modes = {m.value for m in TimeMode}
    mode_index = next((i for i, p in enumerate(parts) if p.casefold() in modes), None)
    if mode_index is None:
        return None

    field = _TIME_FIELDS.get(" ".join(parts[:mode_index]).casefold())
    if field is None:
        return None
    mode = TimeMode(parts[mode_index].casefold())
    value = parts[mode_index + 1 :]

    if len(value) == 1 and _DATE_PATTERN.match(value[0]):
        try:
            return TimeSubject(field=field, mode=mode, on=date.fromisoformat(value[0]))
        except ValueError:
            return None

    # before/after only accept dates
    if mode in (TimeMode.BEFORE, TimeMode.AFTER) or len(value) != 2:
        return None
    try:
        amount = int(value[0])
    except ValueError:
        return None
    unit_text = value[1].casefold().removesuffix("s")
    if unit_text not in {u.value for u in TimeUnit}:
        return None
    return TimeSubject(field=field, mode=mode, amount=amount, unit=TimeUnit(unit_text))


def decode_action(text: str) -> Action | None:
    """Decode action text. Returns None for unrecognized vocabulary."""
    text = text.strip()

    rest = _strip_prefix(text, "Sort > ")
    if rest is not None:
        text = rest.strip()
    rest = _strip_prefix(text, "Sort by ")
    if rest is not None:
        field = _SORT_FIELDS.get(rest.strip().casefold())
        return SortAction(field=field) if field is not None else None

    match = _PUT_IN_FOLDER.match(text)
    if match:
        return PutInFolderAction(name=match.group("name"))
    rest = _strip_prefix(text, "Put in folder > ")
    if rest is not None and rest.strip():
        return PutInFolderAction(name=rest.strip())

    if text.casefold() == "delete":
        return DeleteAction()

    if text.casefold() == "zip":
        return ZipAction()
    match = _ZIP_IN_FOLDER.match(text)
    if match:
        return ZipAction(name=match.group("name"))
    rest = _strip_prefix(text, "Zip > ")
    if rest is not None and rest.strip():
        return ZipAction(name=rest.strip())

    return None


def parse_rule(text: str) -> ParsedRule | None:
    """Split and decode *text*. Returns None on a parse failure."""
    raw = split_rule(text)
    if raw is None:
        return None
    return ParsedRule(text=raw, subject=decode_subject(raw.subject), action=decode_action(raw.action))


def _variant(value: Subject | Action) -> dict[str, Any]:
    fields = {k: v.isoformat() if isinstance(v, date) else v for k, v in asdict(value).items()}
    return {"kind": value.kind, **fields}


def describe(parsed: ParsedRule) -> dict[str, Any]:
    """JSON-ready view of a decoded rule: variant kinds plus their parameters."""
    return {
        "subject": _variant(parsed.subject),
        "action": None if parsed.action is None else _variant(parsed.action),
    }
