"""Severity-tagged diagnostics produced while scanning documentation."""

from enum import Enum
from typing import Iterable

from pydantic import BaseModel


class Severity(str, Enum):
    MESSAGE = "message"
    WARNING = "warning"
    ERROR = "error"


class ErrorCode(str, Enum):
    ERROR_OPENING_FILE = "ErrorOpeningFile"
    ERROR_READING_FILE = "ErrorReadingFile"
    MARKDOWN_PARSER_ERROR = "MarkdownParserError"
    ANNOTATION_PARSER_ERROR = "AnnotationParserError"
    UNSUPPORTED_ANNOTATION_BLOCK_TYPE = "UnsupportedAnnotationBlockType"
    RESPONSE_WITHOUT_REQUEST = "ResponseWithoutRequest"
    UNKNOWN_TABLE_TYPE = "UnknownTableType"
    MALFORMED_TABLE_ROW = "MalformedTableRow"
    MISSING_LINK_SOURCE_ID = "MissingLinkSourceId"
    LINK_DESTINATION_NOT_FOUND = "LinkDestinationNotFound"
    LINK_DESTINATION_OUTSIDE_DOC_SET = "LinkDestinationOutsideDocSet"
    LINK_FORMAT_INVALID = "LinkFormatInvalid"
    LINK_VALIDATION_SKIPPED = "LinkValidationSkipped"
    UNKNOWN = "Unknown"


class Diagnostic(BaseModel):
    """A single message, warning, or error about a document."""

    severity: Severity
    code: ErrorCode | None = None
    source: str | None = None  # display name of the document
    text: str

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    @property
    def is_warning(self) -> bool:
        return self.severity is Severity.WARNING

    @classmethod
    def error(cls, code: ErrorCode, source: str | None, text: str) -> "Diagnostic":
        return cls(severity=Severity.ERROR, code=code, source=source, text=text)

    @classmethod
    def warning(cls, code: ErrorCode, source: str | None, text: str) -> "Diagnostic":
        return cls(severity=Severity.WARNING, code=code, source=source, text=text)

    @classmethod
    def message(cls, source: str | None, text: str) -> "Diagnostic":
        return cls(severity=Severity.MESSAGE, source=source, text=text)

    def __str__(self) -> str:
        label = self.severity.value.upper()
        code = f" {self.code.value}" if self.code else ""
        source = f" ({self.source})" if self.source else ""
        return f"[{label}]{code}{source}: {self.text}"


def has_errors(diagnostics: Iterable[Diagnostic]) -> bool:
    """True if any diagnostic has Error severity."""
    return any(d.is_error for d in diagnostics)
