"""Link validation.

Every link in a document is classified: external and bookmark links are
skipped, relative links must point at an existing file inside the doc set.
"""

from enum import Enum
from pathlib import Path
from urllib.parse import unquote, urlsplit

from apidoc_validator.diagnostics import Diagnostic, ErrorCode, has_errors
from apidoc_validator.logging import get_logger
from apidoc_validator.parser.base import LinkRef

logger = get_logger("links")

PARENT_SEGMENTS = ("../", "..\\")


class LinkValidationResult(str, Enum):
    VALID = "Valid"
    FILE_NOT_FOUND = "FileNotFound"
    URL_FORMAT_INVALID = "UrlFormatInvalid"
    EXTERNAL_SKIPPED = "ExternalSkipped"
    BOOKMARK_SKIPPED = "BookmarkSkipped"
    PARENT_ABOVE_DOC_SET_PATH = "ParentAboveDocSetPath"


def validate_links(
    document_path: Path,
    docset_path: Path,
    links: list[LinkRef],
    include_warnings: bool = False,
    source: str | None = None,
) -> tuple[bool, list[Diagnostic]]:
    """Check every link of a document.

    Returns (ok, diagnostics); ok is False when any link is broken.
    Skipped links are reported as warnings only when include_warnings is set.
    """
    diagnostics: list[Diagnostic] = []

    for link in links:
        if not link.resolved or link.target_url is None:
            diagnostics.append(
                Diagnostic.error(
                    ErrorCode.MISSING_LINK_SOURCE_ID,
                    source,
                    f"Link specifies ID '{link.reference_id or link.link_text}' which was not found in the document.",
                )
            )
            continue

        url = link.target_url
        result = verify_link(document_path, url, docset_path)
        logger.debug("%s -> %s", url, result.value)

        if result in (LinkValidationResult.EXTERNAL_SKIPPED, LinkValidationResult.BOOKMARK_SKIPPED):
            if include_warnings:
                diagnostics.append(
                    Diagnostic.warning(
                        ErrorCode.LINK_VALIDATION_SKIPPED,
                        source,
                        f"Skipped validation of link '{link.link_text}' to URL '{url}'",
                    )
                )
        elif result is LinkValidationResult.FILE_NOT_FOUND:
            diagnostics.append(
                Diagnostic.error(
                    ErrorCode.LINK_DESTINATION_NOT_FOUND,
                    source,
                    f"Destination missing for link '{link.link_text}' to URL '{url}'",
                )
            )
        elif result is LinkValidationResult.PARENT_ABOVE_DOC_SET_PATH:
            diagnostics.append(
                Diagnostic.error(
                    ErrorCode.LINK_DESTINATION_OUTSIDE_DOC_SET,
                    source,
                    f"Destination outside of doc set for link '{link.link_text}' to URL '{url}'",
                )
            )
        elif result is LinkValidationResult.URL_FORMAT_INVALID:
            diagnostics.append(
                Diagnostic.error(
                    ErrorCode.LINK_FORMAT_INVALID,
                    source,
                    f"Invalid URL format for link '{link.link_text}' to URL '{url}'",
                )
            )
        elif result is LinkValidationResult.VALID:
            diagnostics.append(Diagnostic.message(source, f"Link to URL '{url}' is valid."))
        else:
            diagnostics.append(
                Diagnostic.error(ErrorCode.UNKNOWN, source, f"{result.value}: for link '{link.link_text}' to URL '{url}'")
            )

    return not has_errors(diagnostics), diagnostics


def verify_link(document_path: Path, url: str, docset_path: Path) -> LinkValidationResult:
    """Classify a single link target."""
    if not url.strip():
        return LinkValidationResult.URL_FORMAT_INVALID
    try:
        parts = urlsplit(url)
    except ValueError:
        return LinkValidationResult.URL_FORMAT_INVALID

    if parts.scheme in ("http", "https"):
        if not parts.netloc:
            return LinkValidationResult.URL_FORMAT_INVALID
        return LinkValidationResult.EXTERNAL_SKIPPED
    if url.startswith("#"):
        return LinkValidationResult.BOOKMARK_SKIPPED
    return verify_relative_link(Path(document_path), url, Path(docset_path))


def verify_relative_link(source_file: Path, url: str, docset_path: Path) -> LinkValidationResult:
    """Resolve a relative link against the directory of ``source_file``."""
    root = source_file.resolve().parent
    docset_root = docset_path.resolve()

    if "#" in url:
        url = url[: url.index("#")]

    while url.startswith(PARENT_SEGMENTS):
        root = root.parent
        url = url[len(PARENT_SEGMENTS[0]):]

    if len(str(root)) < len(str(docset_root)):
        return LinkValidationResult.PARENT_ABOVE_DOC_SET_PATH

    # Inner ".." segments and absolute paths can still leave the doc set
    target = (root / unquote(url)).resolve()
    if not target.is_relative_to(docset_root):
        return LinkValidationResult.PARENT_ABOVE_DOC_SET_PATH
    if not target.is_file():
        return LinkValidationResult.FILE_NOT_FOUND
    return LinkValidationResult.VALID
