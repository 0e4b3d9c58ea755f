"""Table spec converter.

Classifies a Markdown table by the heading above it and converts each
row into the row type for that classification.
"""

import json
import re

from apidoc_validator.definitions import (
    EnumValueDefinition,
    ErrorDefinition,
    ParameterDefinition,
    PropertyDefinition,
    RawRowDefinition,
    TableBlockType,
    TableDefinition,
)
from apidoc_validator.diagnostics import Diagnostic, ErrorCode
from apidoc_validator.parser.base import Block

TABLE_TYPE_VOCABULARY = {
    "error responses": TableBlockType.ERROR_CODES,
    "error codes": TableBlockType.ERROR_CODES,
    "path parameters": TableBlockType.PATH_PARAMETERS,
    "query string parameters": TableBlockType.QUERY_STRING_PARAMETERS,
    "optional query string parameters": TableBlockType.QUERY_STRING_PARAMETERS,
    "http request headers": TableBlockType.HTTP_HEADERS,
    "request headers": TableBlockType.HTTP_HEADERS,
    "request body": TableBlockType.REQUEST_OBJECT_PROPERTIES,
    "request body properties": TableBlockType.REQUEST_OBJECT_PROPERTIES,
    "response body": TableBlockType.RESPONSE_OBJECT_PROPERTIES,
    "response properties": TableBlockType.RESPONSE_OBJECT_PROPERTIES,
    "response body properties": TableBlockType.RESPONSE_OBJECT_PROPERTIES,
    "properties": TableBlockType.RESOURCE_PROPERTY_DESCRIPTIONS,
    "resource properties": TableBlockType.RESOURCE_PROPERTY_DESCRIPTIONS,
    "enumeration values": TableBlockType.ENUMERATION_VALUES,
    "enumerated values": TableBlockType.ENUMERATION_VALUES,
}

PARAMETER_LOCATIONS = {
    TableBlockType.PATH_PARAMETERS: "path",
    TableBlockType.QUERY_STRING_PARAMETERS: "query",
    TableBlockType.HTTP_HEADERS: "header",
}

# Column layout for each row type, used positionally when the table header is not recognized
ROW_COLUMNS = {
    TableBlockType.ERROR_CODES: ("code", "description"),
    TableBlockType.PATH_PARAMETERS: ("name", "type", "description"),
    TableBlockType.QUERY_STRING_PARAMETERS: ("name", "type", "description"),
    TableBlockType.HTTP_HEADERS: ("name", "type", "description"),
    TableBlockType.REQUEST_OBJECT_PROPERTIES: ("name", "type", "description"),
    TableBlockType.RESPONSE_OBJECT_PROPERTIES: ("name", "type", "description"),
    TableBlockType.RESOURCE_PROPERTY_DESCRIPTIONS: ("name", "type", "description"),
    TableBlockType.ENUMERATION_VALUES: ("value", "description"),
}

# Header names accepted for each row field
COLUMN_NAMES = {
    "name": {"name", "parameter", "parameter name", "property", "property name", "header", "field"},
    "code": {"code", "status code", "http status code", "error code", "response code"},
    "value": {"value", "name", "member", "enum value"},
    "type": {"type", "data type", "value type"},
    "required": {"required"},
    "description": {"description", "details", "remarks"},
}

REQUIRED_MARKERS = {"yes", "y", "true", "required"}


def normalize_header_text(text: str) -> str:
    """Lowercase heading text with emphasis, trailing colon and extra spaces removed."""
    text = re.sub(r"[*_`]", "", text)
    text = text.strip().rstrip(":")
    return " ".join(text.split()).casefold()


def classify_table(header_text: str, section: str | None = None) -> TableBlockType:
    """Map heading text to a table type.

    A bare "Properties" heading under a section about a request or a
    response describes that body rather than the resource.
    """
    normalized = normalize_header_text(header_text)
    if normalized == "properties" and section:
        words = normalize_header_text(section).split()
        if any(word.startswith("response") for word in words):
            return TableBlockType.RESPONSE_OBJECT_PROPERTIES
        if any(word.startswith("request") for word in words):
            return TableBlockType.REQUEST_OBJECT_PROPERTIES
    return TABLE_TYPE_VOCABULARY.get(normalized, TableBlockType.UNKNOWN)


def parse_table_spec(
    table_block: Block,
    preceding_header: Block,
    source: str | None = None,
    section: str | None = None,
) -> tuple[TableDefinition, list[Diagnostic]]:
    """Convert a table block into a TableDefinition typed by its preceding header.

    Cells are matched to row fields by the table's own column names. When
    those are not recognized the cells are taken by position.
    """
    title = preceding_header.header_text
    table_type = classify_table(title, section)
    diagnostics: list[Diagnostic] = []

    if table_type is TableBlockType.UNKNOWN:
        diagnostics.append(
            Diagnostic.warning(
                ErrorCode.UNKNOWN_TABLE_TYPE,
                source,
                f"Unable to classify table with heading '{title}'.",
            )
        )
        rows = [RawRowDefinition(cells=list(cells)) for cells in table_block.table_rows]
        return _table(table_type, title, table_block, rows), diagnostics

    columns = ROW_COLUMNS[table_type]
    fields = columns + ("required",) if table_type in PARAMETER_LOCATIONS else columns
    positions = _column_positions(table_block.table_header, fields, columns)
    if positions is None:
        positions = {field: index for index, field in enumerate(columns)}
        expected = len(columns)
    else:
        expected = len(table_block.table_header)

    rows = []
    for number, cells in enumerate(table_block.table_rows, start=1):
        if len(cells) != expected:
            diagnostics.append(
                Diagnostic.error(
                    ErrorCode.MALFORMED_TABLE_ROW,
                    source,
                    f"Row {number} of table '{title}' has {len(cells)} columns, expected {expected}.",
                )
            )
        values = {field: cells[index] if index < len(cells) else "" for field, index in positions.items()}
        rows.append(_build_row(table_type, values))

    return _table(table_type, title, table_block, rows), diagnostics


def describe_rows(table: TableDefinition) -> str:
    return ",\n".join(json.dumps(row.model_dump(), indent=2) for row in table.rows)


def _table(table_type: TableBlockType, title: str, block: Block, rows: list) -> TableDefinition:
    return TableDefinition(
        table_type=table_type,
        title=title,
        headers=list(block.table_header),
        rows=rows,
    )


def _column_positions(
    header: list[str],
    fields: tuple[str, ...],
    columns: tuple[str, ...],
) -> dict[str, int] | None:
    """Index of each field's column by header name; None unless every column in ``columns`` is named."""
    positions: dict[str, int] = {}
    for index, text in enumerate(header):
        name = normalize_header_text(text)
        for field in fields:
            if field not in positions and name in COLUMN_NAMES[field]:
                positions[field] = index
                break
    if all(column in positions for column in columns):
        return positions
    return None


def _build_row(table_type: TableBlockType, values: dict[str, str]):
    if table_type is TableBlockType.ERROR_CODES:
        return ErrorDefinition(code=_clean_cell(values["code"]), description=values["description"])
    if table_type is TableBlockType.ENUMERATION_VALUES:
        return EnumValueDefinition(value=_clean_cell(values["value"]), description=values["description"])
    if table_type in PARAMETER_LOCATIONS:
        required = _clean_cell(values.get("required", "")).casefold() in REQUIRED_MARKERS
        return ParameterDefinition(
            name=_clean_cell(values["name"]),
            type=_clean_cell(values["type"]),
            required=required or table_type is TableBlockType.PATH_PARAMETERS,
            description=values["description"],
            location=PARAMETER_LOCATIONS[table_type],
        )
    return PropertyDefinition(
        name=_clean_cell(values["name"]),
        type=_clean_cell(values["type"]),
        description=values["description"],
    )


def _clean_cell(cell: str) -> str:
    return cell.strip().strip("`*").strip()
