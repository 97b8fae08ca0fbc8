from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator

from ..errors import MalformedRecordError, TraceSourceError
from ..runtime.address import ADDRESS_WIDTH_BITS
from ..utils.logging import get_logger

logger = get_logger(__name__)


class AccessKind(Enum):
    """Valgrind lackey record kinds."""
    INSTRUCTION = "I"
    LOAD = "L"
    STORE = "S"
    MODIFY = "M"

    @property
    def access_count(self) -> int:
        """Number of data-cache accesses the record stands for."""
        if self is AccessKind.INSTRUCTION:
            return 0
        if self is AccessKind.MODIFY:
            return 2  # load followed by a store to the same address
        return 1


@dataclass(frozen=True)
class TraceRecord:
    kind: AccessKind
    address: int
    size: int

    def __str__(self) -> str:
        return f"{self.kind.value} {self.address:x},{self.size}"


def parse_trace_line(line: str, line_no: int | None = None) -> TraceRecord | None:
    """Parses one ` <Kind> <hexaddr>,<size>` record.

    Returns None for blank lines and raises MalformedRecordError for anything
    that does not follow the record layout.
    """
    text = line.strip()
    if not text:
        return None

    parts = text.split(None, 1)
    if len(parts) != 2:
        raise MalformedRecordError(line, "expected '<kind> <address>,<size>'", line_no)
    kind_str, operand = parts

    try:
        kind = AccessKind(kind_str)
    except ValueError:
        raise MalformedRecordError(line, f"unknown access kind {kind_str!r}", line_no) from None

    addr_str, sep, size_str = operand.partition(",")
    if not sep:
        raise MalformedRecordError(line, "missing ',<size>' field", line_no)
    try:
        address = int(addr_str.strip(), 16)
        size = int(size_str.strip())
    except ValueError:
        raise MalformedRecordError(line, "address or size is not a number", line_no) from None

    if address < 0 or address >> ADDRESS_WIDTH_BITS:
        raise MalformedRecordError(line, f"address does not fit in {ADDRESS_WIDTH_BITS} bits", line_no)
    if size < 0:
        raise MalformedRecordError(line, "negative access size", line_no)

    return TraceRecord(kind=kind, address=address, size=size)


def parse_trace(lines: Iterable[str]) -> Iterator[TraceRecord]:
    """Yields records from trace text, skipping blank and malformed lines."""
    for line_no, line in enumerate(lines, start=1):
        try:
            record = parse_trace_line(line, line_no)
        except MalformedRecordError as e:
            logger.warning(f"Skipping malformed trace record at {e}")
            continue
        if record is not None:
            yield record


def read_trace(path: str | Path) -> Iterator[TraceRecord]:
    """Streams the records of a trace file.

    Raises TraceSourceError when the file cannot be opened or decoded, which
    may happen part-way through iteration.
    """
    trace_path = Path(path)
    try:
        f = open(trace_path, "r", encoding="ascii")
    except OSError as e:
        raise TraceSourceError(f"{trace_path}: {e.strerror or e}") from e

    with f:
        try:
            yield from parse_trace(f)
        except (OSError, UnicodeDecodeError) as e:
            raise TraceSourceError(f"{trace_path}: {e}") from e
