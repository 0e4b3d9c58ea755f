import json
from pathlib import Path

from click.testing import CliRunner

from apidoc_validator.cli import main

FIXTURES = Path(__file__).parent / "fixtures"
DOCS = FIXTURES / "docs"


def _write_docset(root: Path) -> Path:
    (root / "api").mkdir(parents=True)
    (root / "api" / "get.md").write_text(
        "# Get item\n\nRetrieve an item. See [the resource](../item.md).\n",
        encoding="utf-8",
    )
    (root / "item.md").write_text("# Item\n\nAn item.\n", encoding="utf-8")
    return root


class TestCliScan:
    def test_scan_fixture_docset(self):
        runner = CliRunner()
        result = runner.invoke(main, ["scan", str(DOCS)])

        assert result.exit_code == 0
        assert "Scanning 3 files" in result.output
        assert "Found 1 resources and 1 methods." in result.output
        assert "Scan: 0 errors, 0 warnings." in result.output

    def test_scan_verbose_shows_messages(self):
        runner = CliRunner()
        result = runner.invoke(main, ["scan", str(DOCS), "--verbose"])

        assert result.exit_code == 0
        assert "Found page title: Get Drive" in result.output

    def test_scan_dump_definitions(self, tmp_path):
        output_file = tmp_path / "out" / "definitions.json"
        runner = CliRunner()
        result = runner.invoke(main, ["scan", str(DOCS), "--dump", str(output_file)])

        assert result.exit_code == 0
        data = json.loads(output_file.read_text(encoding="utf-8"))
        methods = [d for d in data["/drive/get.md"] if "identifier" in d]
        assert methods[0]["identifier"] == "get-drive"
        assert methods[0]["errors"][0]["code"] == "404"

    def test_scan_reports_annotation_errors(self, tmp_path):
        (tmp_path / "bad.md").write_text(
            "# Bad\n\n<!-- { \"blockType\": \"sample\" } -->\n```json\n{}\n```\n",
            encoding="utf-8",
        )
        runner = CliRunner()
        result = runner.invoke(main, ["scan", str(tmp_path)])

        assert result.exit_code == 1
        assert "UnsupportedAnnotationBlockType" in result.output


class TestCliCheckLinks:
    def test_broken_links_fail(self):
        runner = CliRunner()
        result = runner.invoke(main, ["check-links", str(DOCS)])

        assert result.exit_code == 1
        assert "LinkDestinationNotFound" in result.output
        assert "LinkDestinationOutsideDocSet" in result.output
        assert "MissingLinkSourceId" in result.output

    def test_valid_links_pass(self, tmp_path):
        docset = _write_docset(tmp_path / "docs")
        runner = CliRunner()
        result = runner.invoke(main, ["check-links", str(docset)])

        assert result.exit_code == 0
        assert "Links: 0 errors, 0 warnings." in result.output

    def test_json_format(self, tmp_path):
        docset = _write_docset(tmp_path / "docs")
        (docset / "api" / "get.md").write_text("# Get\n\n[site](https://example.com)\n", encoding="utf-8")
        runner = CliRunner()
        result = runner.invoke(main, ["check-links", str(docset), "--warnings", "--format", "json"])

        assert result.exit_code == 0
        diagnostics = json.loads(result.output)
        assert [d["code"] for d in diagnostics] == ["LinkValidationSkipped"]
        assert diagnostics[0]["severity"] == "warning"

    def test_warnings_from_config_file(self, tmp_path):
        docset = _write_docset(tmp_path / "docs")
        (docset / "api" / "get.md").write_text("# Get\n\n[top](#get)\n", encoding="utf-8")
        (docset / "apidocs.yaml").write_text("include_warnings: true\n", encoding="utf-8")
        runner = CliRunner()
        result = runner.invoke(main, ["check-links", str(docset)], env={"APIDOCS_INCLUDE_WARNINGS": None})

        assert result.exit_code == 0
        assert "LinkValidationSkipped" in result.output

    def test_invalid_config(self, tmp_path):
        docset = _write_docset(tmp_path / "docs")
        (docset / "apidocs.yaml").write_text("extensions: 5\n", encoding="utf-8")
        runner = CliRunner()
        result = runner.invoke(main, ["check-links", str(docset)])

        assert result.exit_code != 0
        assert "Invalid config" in result.output


class TestCliRun:
    def test_run_full_pipeline(self):
        runner = CliRunner()
        result = runner.invoke(main, ["run", str(DOCS)])

        assert result.exit_code == 1
        assert "Scan: 0 errors, 0 warnings." in result.output
        assert "Links: 3 errors, 0 warnings." in result.output

    def test_run_clean_docset(self, tmp_path):
        docset = _write_docset(tmp_path / "docs")
        runner = CliRunner()
        result = runner.invoke(main, ["run", str(docset)])

        assert result.exit_code == 0
