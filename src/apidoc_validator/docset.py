"""A doc set: every documentation file under one root directory."""

import fnmatch
from pathlib import Path

from apidoc_validator.config import ValidatorConfig
from apidoc_validator.definitions import MethodDefinition, ResourceDefinition
from apidoc_validator.diagnostics import Diagnostic
from apidoc_validator.docfile import DocFile
from apidoc_validator.logging import get_logger

logger = get_logger("docset")


class DocSet:
    """Discovers documentation files and runs the per-file checks over them."""

    def __init__(self, root: Path, config: ValidatorConfig | None = None):
        self.root = Path(root)
        self.config = config or ValidatorConfig()
        self.files = self._discover()

    def _discover(self) -> list[DocFile]:
        extensions = {ext.lower() for ext in self.config.extensions}
        files = []
        for path in sorted(self.root.rglob("*")):
            if not path.is_file() or path.suffix.lower() not in extensions:
                continue
            relative = path.relative_to(self.root).as_posix()
            if any(fnmatch.fnmatch(relative, pattern) for pattern in self.config.exclude):
                logger.debug("excluded %s", relative)
                continue
            files.append(DocFile(self.root, "/" + relative))
        logger.info("found %d documentation files under %s", len(files), self.root)
        return files

    def scan(self) -> tuple[bool, list[Diagnostic]]:
        """Scan every file; ok only if no file produced an error."""
        ok = True
        diagnostics: list[Diagnostic] = []
        for doc in self.files:
            file_ok, file_diagnostics = doc.scan()
            ok = ok and file_ok
            diagnostics.extend(file_diagnostics)
        return ok, diagnostics

    def validate_links(self, include_warnings: bool | None = None) -> tuple[bool, list[Diagnostic]]:
        """Validate links in every file, scanning files that were not scanned yet."""
        if include_warnings is None:
            include_warnings = self.config.include_warnings
        ok = True
        diagnostics: list[Diagnostic] = []
        for doc in self.files:
            if not doc.scanned:
                scan_ok, scan_diagnostics = doc.scan()
                if not scan_ok and not doc.blocks:
                    # unreadable file: report the terminal error instead of its links
                    ok = False
                    diagnostics.extend(d for d in scan_diagnostics if d.is_error)
                    continue
            file_ok, file_diagnostics = doc.validate_links(include_warnings)
            ok = ok and file_ok
            diagnostics.extend(file_diagnostics)
        return ok, diagnostics

    @property
    def resources(self) -> list[ResourceDefinition]:
        return [r for doc in self.files for r in doc.resources]

    @property
    def methods(self) -> list[MethodDefinition]:
        return [m for doc in self.files for m in doc.requests]
