from __future__ import annotations


class ConfigurationError(ValueError):
    """Cache geometry or run options are missing or unusable."""


class TraceSourceError(OSError):
    """The trace file could not be opened or read."""


class MalformedRecordError(ValueError):
    """A single trace record could not be parsed."""

    def __init__(self, line: str, reason: str, line_no: int | None = None):
        self.line = line
        self.reason = reason
        self.line_no = line_no
        where = f"line {line_no}: " if line_no is not None else ""
        super().__init__(f"{where}{reason}: {line!r}")
