from apidoc_validator.attach import attach
from apidoc_validator.definitions import (
    ErrorDefinition,
    MethodDefinition,
    ParameterDefinition,
    PropertyDefinition,
    ResourceDefinition,
    TableBlockType,
    TableDefinition,
)


def _method(**overrides) -> MethodDefinition:
    defaults = dict(identifier="get-item", request_body="GET /drive/items/{item-id} HTTP/1.1")
    defaults.update(overrides)
    return MethodDefinition(**defaults)


def _param(name: str, location: str = "path") -> ParameterDefinition:
    return ParameterDefinition(name=name, type="string", location=location)


class TestSingleMethod:
    def test_error_table_replaces_errors(self):
        method = _method(errors=[ErrorDefinition(code="500")])
        table = TableDefinition(
            table_type=TableBlockType.ERROR_CODES,
            rows=[ErrorDefinition(code="404"), ErrorDefinition(code="403")],
        )
        diagnostics = attach([method, table])
        assert [e.code for e in method.errors] == ["404", "403"]
        assert method.parameters == []
        assert len(diagnostics) == 1
        assert not diagnostics[0].is_error

    def test_parameter_tables_are_appended(self):
        method = _method(parameters=[_param("existing")])
        path_table = TableDefinition(table_type=TableBlockType.PATH_PARAMETERS, rows=[_param("item-id")])
        query_table = TableDefinition(
            table_type=TableBlockType.QUERY_STRING_PARAMETERS, rows=[_param("top", "query")]
        )
        header_table = TableDefinition(
            table_type=TableBlockType.HTTP_HEADERS, rows=[_param("if-match", "header")]
        )
        attach([method, path_table, query_table, header_table])
        assert [p.name for p in method.parameters] == ["existing", "item-id", "top", "if-match"]

    def test_rows_are_copied(self):
        method = _method()
        row = _param("item-id")
        attach([method, TableDefinition(table_type=TableBlockType.PATH_PARAMETERS, rows=[row])])
        assert method.parameters[0] == row
        assert method.parameters[0] is not row

    def test_property_tables_are_not_attached(self):
        method = _method()
        table = TableDefinition(
            table_type=TableBlockType.RESOURCE_PROPERTY_DESCRIPTIONS,
            rows=[PropertyDefinition(name="id")],
        )
        diagnostics = attach([method, table])
        assert method.parameters == []
        assert method.errors == []
        assert diagnostics == []

    def test_other_definitions_are_ignored(self):
        method = _method()
        resource = ResourceDefinition(raw_body="{}")
        table = TableDefinition(table_type=TableBlockType.ERROR_CODES, rows=[ErrorDefinition(code="404")])
        attach([resource, method, table])
        assert len(method.errors) == 1


class TestNoAttachment:
    def test_no_methods(self):
        table = TableDefinition(table_type=TableBlockType.ERROR_CODES, rows=[ErrorDefinition(code="404")])
        assert attach([table]) == []

    def test_two_methods_no_attachment_no_error(self):
        first, second = _method(identifier="a"), _method(identifier="b")
        table = TableDefinition(table_type=TableBlockType.PATH_PARAMETERS, rows=[_param("item-id")])
        errors = TableDefinition(table_type=TableBlockType.ERROR_CODES, rows=[ErrorDefinition(code="404")])
        diagnostics = attach([first, second, table, errors])
        assert diagnostics == []
        assert first.parameters == [] and second.parameters == []
        assert first.errors == [] and second.errors == []
