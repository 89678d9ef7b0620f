"""Cobertura XML streaming reader.

Cobertura XML is produced by many coverage tools across languages:
- Python: coverage.py
- Rust: cargo-tarpaulin, grcov
- .NET: coverlet
- Go: gocover-cobertura
- Java: some tools export to Cobertura format

Structure (element depth in brackets):
<coverage line-rate="0.85" ...>                                   [1]
  <packages>                                                      [2]
    <package name="...">                                          [3]
      <classes>                                                   [4]
        <class name="..." filename="src/lib.rs" line-rate="...">  [5]
          <methods>                                               [6]
            <method name="..." signature="...">                   [7]
              <lines>                                             [8]
                <line number="1" hits="1"/>                       [9]
              </lines>
            </method>
          </methods>
          <lines>                                                 [6]
            <line number="1" hits="1" branch="false"/>            [7]
          </lines>
        </class>
      </classes>
    </package>
  </packages>
</coverage>

Only class-level lines are read; method-level lines sit below the line band
and would double count.

The document is streamed with ``iterparse`` and never held in memory as a
whole. The only state kept between events is the current depth, a small
state enum and the record in progress.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Iterator
from enum import Enum
from pathlib import Path
from xml.parsers.expat import errors as expat_errors

import structlog

from commitcov.coverage.models import (
    CoverageParseError,
    CoverageRecord,
    ReadDiagnostic,
    ReadOutcome,
)
from commitcov.coverage.parsers.base import CoverageRecordStream

logger = structlog.get_logger()

FILE_TAG = "class"
LINE_TAG = "line"
FILE_DEPTH = 5
LINE_DEPTH_MIN = 6
LINE_DEPTH_MAX = 8

# Expat errors that mean "the document stopped early" rather than "the document is wrong"
_TRUNCATION_CODES = frozenset(
    expat_errors.codes[message]
    for message in (
        expat_errors.XML_ERROR_NO_ELEMENTS,
        expat_errors.XML_ERROR_UNCLOSED_TOKEN,
        expat_errors.XML_ERROR_PARTIAL_CHAR,
        expat_errors.XML_ERROR_UNCLOSED_CDATA_SECTION,
    )
)


class ReaderState(Enum):
    """Where the reader is relative to the levels of interest."""

    IDLE = "idle"
    IN_FILE = "in_file"
    IN_LINE_BAND = "in_line_band"


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _parse_count(value: str | None) -> int:
    """Parse a non-negative decimal attribute, defaulting to 0."""
    if value is None:
        return 0
    value = value.strip()
    if not value.isascii() or not value.isdigit():
        return 0
    return int(value)


class CoberturaStateMachine:
    """Depth-driven state machine fed with start/end element events."""

    def __init__(self, outcome: ReadOutcome) -> None:
        self._outcome = outcome
        self.depth = 0
        self.state = ReaderState.IDLE
        self.record: CoverageRecord | None = None

    def start(self, tag: str, attrib: dict[str, str]) -> None:
        self.depth += 1

        if tag == FILE_TAG and self.depth == FILE_DEPTH:
            self.record = None
            self.state = ReaderState.IDLE
            filename = attrib.get("filename")
            if not filename:
                self._outcome.diagnostics.append(
                    ReadDiagnostic("missing_filename", "class element has no filename attribute")
                )
                logger.warning("coverage_class_without_filename", name=attrib.get("name"))
                return
            self.record = CoverageRecord(path=filename)
            self.state = ReaderState.IN_FILE
            return

        if self.state is ReaderState.IDLE:
            return

        if LINE_DEPTH_MIN <= self.depth <= LINE_DEPTH_MAX:
            self.state = ReaderState.IN_LINE_BAND
            if tag == LINE_TAG:
                self._add_line(attrib)

    def end(self, tag: str) -> CoverageRecord | None:
        emitted: CoverageRecord | None = None

        if tag == FILE_TAG and self.depth == FILE_DEPTH:
            emitted = self.record
            self.record = None
            self.state = ReaderState.IDLE
        elif self.state is ReaderState.IN_LINE_BAND and self.depth == LINE_DEPTH_MIN:
            self.state = ReaderState.IN_FILE

        self.depth -= 1
        return emitted

    def reset(self) -> CoverageRecord | None:
        """Drop any in-progress record and return to depth zero."""
        dangling = self.record
        self.record = None
        self.depth = 0
        self.state = ReaderState.IDLE
        return dangling

    def _add_line(self, attrib: dict[str, str]) -> None:
        number = attrib.get("number")
        hits = attrib.get("hits")
        if self.record is None or number is None or hits is None:
            return
        line_number = _parse_count(number)
        if line_number == 0:
            return
        self.record.add_line(line_number, _parse_count(hits) > 0)


class CoberturaReader:
    """Streaming reader for Cobertura XML format."""

    @property
    def format_id(self) -> str:
        return "cobertura"

    def can_parse(self, path: Path) -> bool:
        """Check if file looks like Cobertura XML."""
        if path.is_dir():
            for name in ["coverage.xml", "cobertura.xml", "coverage.cobertura.xml"]:
                if (path / name).exists():
                    return True
            return bool(any(path.glob("**/coverage.cobertura.xml")))

        if not path.is_file():
            return False

        # Content sniff: look for <coverage> root with line-rate attribute
        try:
            with path.open("rb") as f:
                header = f.read(2048).decode("utf-8", errors="ignore")
                if (
                    "<coverage" in header
                    and "line-rate=" in header
                    and "<CoverletCoverage" not in header
                    and "<report name=" not in header
                ):
                    return True
        except OSError:
            pass
        return False

    def _find_xml_file(self, path: Path) -> Path:
        """Find the actual XML file from path or directory."""
        if path.is_file():
            return path

        for name in ["coverage.cobertura.xml", "cobertura.xml", "coverage.xml"]:
            candidate = path / name
            if candidate.exists():
                return candidate

        # .NET TestResults layout
        cobertura_files = sorted(path.glob("**/coverage.cobertura.xml"))
        if cobertura_files:
            return cobertura_files[0]

        raise CoverageParseError(f"No Cobertura XML found in {path}")

    def open(self, path: Path) -> CoverageRecordStream:
        """Open a Cobertura document for streaming."""
        if not path.exists():
            raise CoverageParseError(f"Cobertura path not found: {path}")

        xml_file = self._find_xml_file(path)
        outcome = ReadOutcome()
        return CoverageRecordStream(
            path=xml_file,
            source_format=self.format_id,
            records=_iter_records(xml_file, outcome),
            outcome=outcome,
        )


def _iter_records(path: Path, outcome: ReadOutcome) -> Iterator[CoverageRecord]:
    """Yield one record per class element until the document ends or breaks."""
    machine = CoberturaStateMachine(outcome)

    try:
        handle = path.open("rb")
    except OSError as e:
        outcome.diagnostics.append(ReadDiagnostic("malformed", f"Cannot open report: {e}"))
        logger.warning("coverage_report_unreadable", path=str(path), error=str(e))
        return

    with handle:
        root: ET.Element | None = None
        try:
            for event, elem in ET.iterparse(handle, events=("start", "end")):
                tag = _local_name(elem.tag)
                if event == "start":
                    if root is None:
                        root = elem
                    machine.start(tag, elem.attrib)
                    continue

                record = machine.end(tag)
                elem.clear()
                if record is not None:
                    if root is not None:
                        root.clear()
                    outcome.records_emitted += 1
                    yield record
        except ET.ParseError as e:
            _record_parse_error(path, machine, outcome, e)
            return

    outcome.completed = True


def _record_parse_error(
    path: Path,
    machine: CoberturaStateMachine,
    outcome: ReadOutcome,
    error: ET.ParseError,
) -> None:
    line, column = getattr(error, "position", (None, None))
    truncated = getattr(error, "code", None) in _TRUNCATION_CODES
    depth = machine.depth
    dangling = machine.reset()

    if truncated:
        message = "Unexpected end of file"
        if dangling is not None:
            message += f"; discarded partial record for {dangling.path}"
        diagnostic = ReadDiagnostic("truncated", message, line, column)
    else:
        diagnostic = ReadDiagnostic("malformed", str(error), line, column)

    outcome.diagnostics.append(diagnostic)
    logger.warning(
        "coverage_report_incomplete",
        path=str(path),
        kind=diagnostic.kind,
        detail=diagnostic.message,
        depth=depth,
        records=outcome.records_emitted,
    )
