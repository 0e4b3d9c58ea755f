"""A single documentation file and its scan results."""

from pathlib import Path

from apidoc_validator.definitions import (
    Definition,
    ExampleDefinition,
    MethodDefinition,
    ResourceDefinition,
    TableDefinition,
)
from apidoc_validator.diagnostics import Diagnostic, ErrorCode, has_errors
from apidoc_validator.extractor import extract
from apidoc_validator.links import validate_links
from apidoc_validator.logging import get_logger
from apidoc_validator.parser.base import Block, LinkRef
from apidoc_validator.parser.markdown import tokenize

logger = get_logger("docfile")


class DocFile:
    """A documentation file that may contain resources, methods and examples."""

    def __init__(self, base_path: Path, relative_path: str):
        self.base_path = Path(base_path)
        self.display_name = relative_path
        self.full_path = self.base_path / relative_path.lstrip("/\\")
        self.blocks: list[Block] = []
        self.links: list[LinkRef] = []
        self.definitions: list[Definition] = []
        self._scanned = False

    def __repr__(self) -> str:
        return f"DocFile({self.display_name!r})"

    def scan(self) -> tuple[bool, list[Diagnostic]]:
        """Read the file and extract definitions from it.

        Read and tokenizer failures end the scan with a single error.
        """
        self._scanned = True
        self.blocks, self.links, self.definitions = [], [], []

        try:
            text = self.full_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            return False, [self._error(ErrorCode.ERROR_READING_FILE, f"Error reading file contents: {e}")]
        except OSError as e:
            return False, [self._error(ErrorCode.ERROR_OPENING_FILE, f"Error opening file: {e}")]

        try:
            self.blocks, self.links = tokenize(text)
        except Exception as e:
            logger.debug("tokenizer failed on %s", self.full_path, exc_info=True)
            return False, [self._error(ErrorCode.MARKDOWN_PARSER_ERROR, f"Exception while parsing markdown: {e}")]

        self.definitions, diagnostics = extract(self.blocks, self.display_name)
        return not has_errors(diagnostics), diagnostics

    def validate_links(self, include_warnings: bool = False) -> tuple[bool, list[Diagnostic]]:
        """Check every link found by the last scan."""
        if not self._scanned:
            raise RuntimeError("Cannot validate links until scan() is called.")
        return validate_links(
            self.full_path,
            self.base_path,
            self.links,
            include_warnings=include_warnings,
            source=self.display_name,
        )

    @property
    def scanned(self) -> bool:
        return self._scanned

    @property
    def resources(self) -> list[ResourceDefinition]:
        return [d for d in self.definitions if isinstance(d, ResourceDefinition)]

    @property
    def requests(self) -> list[MethodDefinition]:
        return [d for d in self.definitions if isinstance(d, MethodDefinition)]

    @property
    def examples(self) -> list[ExampleDefinition]:
        return [d for d in self.definitions if isinstance(d, ExampleDefinition)]

    @property
    def tables(self) -> list[TableDefinition]:
        return [d for d in self.definitions if isinstance(d, TableDefinition)]

    @property
    def link_destinations(self) -> list[str]:
        return [link.target_url for link in self.links if link.target_url is not None]

    def _error(self, code: ErrorCode, text: str) -> Diagnostic:
        return Diagnostic.error(code, self.display_name, text)
