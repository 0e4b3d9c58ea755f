"""API definitions extracted from documentation.

Resources, methods and examples come from annotated code blocks; tables
come from Markdown tables classified by the heading above them.
"""

import re
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from apidoc_validator.parser.annotation import Annotation

REQUEST_LINE_RE = re.compile(r"^\s*([A-Z]+)\s+(\S+)")
STATUS_LINE_RE = re.compile(r"^\s*HTTP/\d(?:\.\d)?\s+(\d{3})")


class TableBlockType(str, Enum):
    UNKNOWN = "Unknown"
    ERROR_CODES = "ErrorCodes"
    PATH_PARAMETERS = "PathParameters"
    QUERY_STRING_PARAMETERS = "QueryStringParameters"
    HTTP_HEADERS = "HttpHeaders"
    REQUEST_OBJECT_PROPERTIES = "RequestObjectProperties"
    RESPONSE_OBJECT_PROPERTIES = "ResponseObjectProperties"
    RESOURCE_PROPERTY_DESCRIPTIONS = "ResourcePropertyDescriptions"
    ENUMERATION_VALUES = "EnumerationValues"


class ParameterDefinition(BaseModel):
    row_kind: Literal["parameter"] = "parameter"
    name: str
    type: str = ""
    required: bool = False
    description: str = ""
    location: str  # path / query / header


class ErrorDefinition(BaseModel):
    row_kind: Literal["error"] = "error"
    code: str
    description: str = ""


class PropertyDefinition(BaseModel):
    row_kind: Literal["property"] = "property"
    name: str
    type: str = ""
    description: str = ""


class EnumValueDefinition(BaseModel):
    row_kind: Literal["enum_value"] = "enum_value"
    value: str
    description: str = ""


class RawRowDefinition(BaseModel):
    """Cells of a row from a table whose type could not be determined."""

    row_kind: Literal["raw"] = "raw"
    cells: list[str]


TableRow = Annotated[
    Union[ParameterDefinition, ErrorDefinition, PropertyDefinition, EnumValueDefinition, RawRowDefinition],
    Field(discriminator="row_kind"),
]


class TableDefinition(BaseModel):
    table_type: TableBlockType
    title: str = ""  # text of the heading the table was classified from
    headers: list[str] = []
    rows: list[TableRow] = []


class ResourceDefinition(BaseModel):
    title: str | None = None
    description: str | None = None
    resource_type: str | None = None
    raw_body: str
    owner_document: str = ""


class ExampleDefinition(BaseModel):
    title: str | None = None
    description: str | None = None
    resource_type: str | None = None
    raw_body: str
    owner_document: str = ""


class ExpectedResponse(BaseModel):
    raw_body: str
    status_code: int | None = None
    resource_type: str | None = None
    expect_error: bool = False


class MethodDefinition(BaseModel):
    """An API request plus the responses, parameters and errors documented for it."""

    identifier: str | None = None
    title: str | None = None
    description: str | None = None
    http_method: str | None = None
    request_url: str | None = None
    request_body: str
    expected_responses: list[ExpectedResponse] = []
    parameters: list[ParameterDefinition] = []
    errors: list[ErrorDefinition] = []
    owner_document: str = ""

    @classmethod
    def from_request(cls, code: str, annotation: Annotation, owner_document: str = "") -> "MethodDefinition":
        """Build a method from the body of a request code block."""
        http_method, request_url = _parse_request_line(code)
        return cls(
            identifier=annotation.method_name,
            title=annotation.title,
            http_method=http_method,
            request_url=request_url,
            request_body=code,
            owner_document=owner_document,
        )

    def add_expected_response(self, code: str, annotation: Annotation) -> ExpectedResponse:
        response = ExpectedResponse(
            raw_body=code,
            status_code=_parse_status_code(code),
            resource_type=annotation.resource_type,
            expect_error=annotation.expect_error,
        )
        self.expected_responses.append(response)
        return response


Definition = Union[ResourceDefinition, MethodDefinition, ExampleDefinition, TableDefinition]


def _parse_request_line(code: str) -> tuple[str | None, str | None]:
    match = REQUEST_LINE_RE.match(code)
    if not match:
        return None, None
    return match.group(1), match.group(2)


def _parse_status_code(code: str) -> int | None:
    match = STATUS_LINE_RE.match(code)
    return int(match.group(1)) if match else None
