import pytest

from apidoc_validator.diagnostics import ErrorCode, Severity
from apidoc_validator.links import LinkValidationResult, validate_links, verify_link
from apidoc_validator.parser.base import LinkRef


@pytest.fixture
def docset(tmp_path):
    """docs/a/b.md, docs/c.md and docs/my file.md; a file above the doc set root."""
    root = tmp_path / "docs"
    (root / "a").mkdir(parents=True)
    (root / "a" / "b.md").write_text("# B\n", encoding="utf-8")
    (root / "c.md").write_text("# C\n", encoding="utf-8")
    (root / "my file.md").write_text("# Spaces\n", encoding="utf-8")
    (tmp_path / "c.md").write_text("# Outside\n", encoding="utf-8")
    return root


class TestVerifyLink:
    def test_parent_link_inside_doc_set(self, docset):
        assert verify_link(docset / "a" / "b.md", "../c.md", docset) is LinkValidationResult.VALID

    def test_parent_link_above_doc_set(self, docset):
        result = verify_link(docset / "a" / "b.md", "../../c.md", docset)
        assert result is LinkValidationResult.PARENT_ABOVE_DOC_SET_PATH

    def test_missing_sibling(self, docset):
        result = verify_link(docset / "a" / "b.md", "missing.md", docset)
        assert result is LinkValidationResult.FILE_NOT_FOUND

    def test_sibling_with_fragment(self, docset):
        assert verify_link(docset / "c.md", "a/b.md#section", docset) is LinkValidationResult.VALID

    def test_percent_encoded_path(self, docset):
        assert verify_link(docset / "c.md", "my%20file.md", docset) is LinkValidationResult.VALID

    def test_directory_is_not_a_file(self, docset):
        assert verify_link(docset / "c.md", "a", docset) is LinkValidationResult.FILE_NOT_FOUND

    def test_inner_parent_segment_leaving_doc_set(self, docset):
        result = verify_link(docset / "c.md", "a/../../c.md", docset)
        assert result is LinkValidationResult.PARENT_ABOVE_DOC_SET_PATH

    def test_inner_parent_segment_inside_doc_set(self, docset):
        assert verify_link(docset / "c.md", "a/../c.md", docset) is LinkValidationResult.VALID

    def test_absolute_path_outside_doc_set(self, docset):
        outside = docset.parent / "c.md"
        result = verify_link(docset / "c.md", str(outside), docset)
        assert result is LinkValidationResult.PARENT_ABOVE_DOC_SET_PATH

    def test_external_link(self, docset):
        assert verify_link(docset / "c.md", "https://example.com", docset) is LinkValidationResult.EXTERNAL_SKIPPED

    def test_bookmark_link(self, docset):
        assert verify_link(docset / "c.md", "#section", docset) is LinkValidationResult.BOOKMARK_SKIPPED

    @pytest.mark.parametrize("url", ["", "   ", "http://[::1", "https://"])
    def test_malformed_urls(self, docset, url):
        assert verify_link(docset / "c.md", url, docset) is LinkValidationResult.URL_FORMAT_INVALID


class TestValidateLinks:
    def test_unresolved_reference_id(self, docset):
        links = [LinkRef(link_text="docs", target_url=None, reference_id="nope", resolved=False)]
        ok, diagnostics = validate_links(docset / "c.md", docset, links, source="/c.md")
        assert ok is False
        assert diagnostics[0].code is ErrorCode.MISSING_LINK_SOURCE_ID
        assert "nope" in diagnostics[0].text
        assert diagnostics[0].source == "/c.md"

    def test_skipped_links_are_silent_by_default(self, docset):
        links = [
            LinkRef(link_text="site", target_url="https://example.com"),
            LinkRef(link_text="top", target_url="#top"),
        ]
        ok, diagnostics = validate_links(docset / "c.md", docset, links)
        assert ok is True
        assert diagnostics == []

    def test_skipped_links_warn_when_requested(self, docset):
        links = [
            LinkRef(link_text="site", target_url="https://example.com"),
            LinkRef(link_text="top", target_url="#top"),
        ]
        ok, diagnostics = validate_links(docset / "c.md", docset, links, include_warnings=True)
        assert ok is True
        assert [d.code for d in diagnostics] == [ErrorCode.LINK_VALIDATION_SKIPPED] * 2
        assert all(d.severity is Severity.WARNING for d in diagnostics)

    def test_valid_link_is_a_message(self, docset):
        links = [LinkRef(link_text="c", target_url="../c.md")]
        ok, diagnostics = validate_links(docset / "a" / "b.md", docset, links)
        assert ok is True
        assert diagnostics[0].severity is Severity.MESSAGE

    def test_broken_links(self, docset):
        links = [
            LinkRef(link_text="missing", target_url="missing.md"),
            LinkRef(link_text="outside", target_url="../../c.md"),
            LinkRef(link_text="bad", target_url="http://[::1"),
        ]
        ok, diagnostics = validate_links(docset / "a" / "b.md", docset, links)
        assert ok is False
        assert [d.code for d in diagnostics] == [
            ErrorCode.LINK_DESTINATION_NOT_FOUND,
            ErrorCode.LINK_DESTINATION_OUTSIDE_DOC_SET,
            ErrorCode.LINK_FORMAT_INVALID,
        ]
