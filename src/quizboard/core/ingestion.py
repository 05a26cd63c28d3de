"""Record sources that turn question bank files into :class:`QuestionRecord` lists."""

from __future__ import annotations

import csv
import io
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import orjson
import structlog

from .errors import MalformedRecordError, SourceUnavailableError, UnsupportedFormatError
from .models import OPTION_KEYS, QuestionRecord
from .schemas import validate_record

LOGGER = structlog.get_logger(__name__)

CSV_MIN_COLUMNS = 8


class SourceFormat(str, Enum):
    """Supported question bank formats."""

    CSV = "csv"
    JSON = "json"
    XML = "xml"

    @classmethod
    def from_tag(cls, tag: "SourceFormat | str") -> "SourceFormat":
        if isinstance(tag, cls):
            return tag
        try:
            return cls(str(tag).strip().lower().lstrip("."))
        except ValueError:
            raise UnsupportedFormatError(tag, kind="source format") from None

    @classmethod
    def from_path(cls, path: Path | str) -> "SourceFormat":
        return cls.from_tag(Path(path).suffix)


class RecordSource(ABC):
    """Reads one file format into raw record dictionaries."""

    format: SourceFormat

    @abstractmethod
    def parse(self, source_id: str, data: bytes) -> List[Dict[str, Any]]:
        """Return raw records in file order; raise MalformedRecordError on bad syntax."""

    def load(self, source_id: str) -> List[QuestionRecord]:
        data = _read_source(source_id)
        raw_records = self.parse(source_id, data)
        return [
            validate_record(source_id=source_id, index=index, payload=raw)
            for index, raw in enumerate(raw_records, start=1)
        ]


def _read_source(source_id: str) -> bytes:
    path = Path(source_id)
    try:
        return path.read_bytes()
    except OSError as exc:
        raise SourceUnavailableError(source_id, exc.strerror or str(exc)) from exc


def _first(node: Dict[str, Any], *names: str) -> Any:
    for name in names:
        if name in node:
            return node[name]
    return None


class CsvRecordSource(RecordSource):
    """Rows of ``category,value,question,A,B,C,D,answer`` with an optional header."""

    format = SourceFormat.CSV

    def parse(self, source_id: str, data: bytes) -> List[Dict[str, Any]]:
        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise MalformedRecordError(source_id, "file is not valid UTF-8") from exc

        records: List[Dict[str, Any]] = []
        try:
            rows = list(csv.reader(io.StringIO(text)))
        except csv.Error as exc:
            raise MalformedRecordError(source_id, f"CSV syntax error: {exc}") from exc

        for line_no, row in enumerate(rows, start=1):
            if not any(cell.strip() for cell in row):
                continue
            if line_no == 1 and row[0].strip().lower() == "category":
                continue
            if len(row) < CSV_MIN_COLUMNS:
                raise MalformedRecordError(
                    source_id,
                    f"expected {CSV_MIN_COLUMNS} columns, found {len(row)}",
                    index=line_no,
                )
            records.append(
                {
                    "category": row[0],
                    "value": row[1].strip(),
                    "prompt": row[2],
                    "options": dict(zip(OPTION_KEYS, row[3:7])),
                    "correct_option": row[7],
                }
            )
        return records


class JsonRecordSource(RecordSource):
    """A root array of questions, or an object holding a ``questions`` array."""

    format = SourceFormat.JSON

    def parse(self, source_id: str, data: bytes) -> List[Dict[str, Any]]:
        try:
            root = orjson.loads(data)
        except orjson.JSONDecodeError as exc:
            raise MalformedRecordError(source_id, f"JSON syntax error: {exc}") from exc

        items = root.get("questions") if isinstance(root, dict) else root
        if not isinstance(items, list):
            raise MalformedRecordError(source_id, "expected a list of questions")

        records: List[Dict[str, Any]] = []
        for index, node in enumerate(items, start=1):
            if not isinstance(node, dict):
                raise MalformedRecordError(source_id, "question entry is not an object", index=index)
            options = _first(node, "options", "Options")
            records.append(
                {
                    "category": _first(node, "category", "Category"),
                    "value": _first(node, "value", "Value"),
                    "prompt": _first(node, "question", "Question", "QuestionText"),
                    "options": options,
                    "correct_option": _first(node, "correctAnswer", "CorrectAnswer"),
                }
            )
        return records


class XmlRecordSource(RecordSource):
    """``<question>`` (or ``<QuestionItem>``) elements with nested ``<options>``."""

    format = SourceFormat.XML

    @staticmethod
    def _text(parent: Optional[ET.Element], *tags: str) -> Optional[str]:
        if parent is None:
            return None
        for tag in tags:
            found = parent.find(f".//{tag}")
            if found is not None:
                return (found.text or "").strip()
        return None

    def _elements(self, root: ET.Element) -> Iterable[ET.Element]:
        for tag in ("question", "QuestionItem"):
            elements = list(root.iter(tag))
            if elements:
                return elements
        return []

    def parse(self, source_id: str, data: bytes) -> List[Dict[str, Any]]:
        try:
            root = ET.fromstring(data)
        except ET.ParseError as exc:
            raise MalformedRecordError(source_id, f"XML syntax error: {exc}") from exc

        records: List[Dict[str, Any]] = []
        for element in self._elements(root):
            options_element = element.find(".//options")
            if options_element is None:
                options_element = element.find(".//Options")
            options = None
            if options_element is not None:
                options = {key: self._text(options_element, key, f"Option{key}") for key in OPTION_KEYS}
            records.append(
                {
                    "category": self._text(element, "category", "Category"),
                    "value": self._text(element, "value", "Value"),
                    "prompt": self._text(element, "questionText", "QuestionText"),
                    "options": options,
                    "correct_option": self._text(element, "correctAnswer", "CorrectAnswer"),
                }
            )
        return records


SOURCES: Dict[SourceFormat, RecordSource] = {
    SourceFormat.CSV: CsvRecordSource(),
    SourceFormat.JSON: JsonRecordSource(),
    SourceFormat.XML: XmlRecordSource(),
}


def get_source(format_tag: SourceFormat | str) -> RecordSource:
    return SOURCES[SourceFormat.from_tag(format_tag)]


def load_records(source_id: str, format_tag: SourceFormat | str) -> List[QuestionRecord]:
    """Load every question from ``source_id`` using the reader for ``format_tag``."""

    source = get_source(format_tag)
    records = source.load(str(source_id))
    LOGGER.info("ingestion.loaded", source=str(source_id), format=source.format.value, records=len(records))
    return records


__all__ = [
    "SourceFormat",
    "RecordSource",
    "CsvRecordSource",
    "JsonRecordSource",
    "XmlRecordSource",
    "SOURCES",
    "get_source",
    "load_records",
]
