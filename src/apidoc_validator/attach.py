"""Attach tables found in a document to the method they describe.

Only documents with a single request are handled: every table in the
document is assumed to describe that request. With zero or several
requests nothing is attached.
"""

from apidoc_validator.definitions import (
    Definition,
    ErrorDefinition,
    MethodDefinition,
    ParameterDefinition,
    TableBlockType,
    TableDefinition,
)
from apidoc_validator.diagnostics import Diagnostic

PARAMETER_TABLE_TYPES = (
    TableBlockType.HTTP_HEADERS,
    TableBlockType.PATH_PARAMETERS,
    TableBlockType.QUERY_STRING_PARAMETERS,
)


def attach(definitions: list[Definition], source: str | None = None) -> list[Diagnostic]:
    """Merge table rows into the document's only method, in place."""
    methods = [d for d in definitions if isinstance(d, MethodDefinition)]
    tables = [d for d in definitions if isinstance(d, TableDefinition)]

    # TODO: match tables to methods by parameter names when a page documents several requests
    if len(methods) != 1:
        return []

    method = methods[0]
    diagnostics: list[Diagnostic] = []
    for table in tables:
        if table.table_type is TableBlockType.ERROR_CODES:
            method.errors = [row.model_copy() for row in table.rows if isinstance(row, ErrorDefinition)]
            diagnostics.append(
                Diagnostic.message(source, f"Attached {len(method.errors)} errors to {method.identifier}")
            )
        elif table.table_type in PARAMETER_TABLE_TYPES:
            added = [row.model_copy() for row in table.rows if isinstance(row, ParameterDefinition)]
            method.parameters = [*method.parameters, *added]
            diagnostics.append(
                Diagnostic.message(source, f"Attached {len(added)} parameters to {method.identifier}")
            )
        # Request/response/resource properties and enumeration values are not attached yet

    return diagnostics
