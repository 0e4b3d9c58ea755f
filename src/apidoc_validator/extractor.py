"""Document extractor.

Walks the blocks of one document in order and turns annotated code
blocks and classified tables into definitions. The page's first heading
and paragraph become the title and description of what is found on it.
"""

from dataclasses import dataclass, field

from apidoc_validator.attach import attach
from apidoc_validator.definitions import (
    Definition,
    ExampleDefinition,
    MethodDefinition,
    ResourceDefinition,
)
from apidoc_validator.diagnostics import Diagnostic, ErrorCode
from apidoc_validator.logging import get_logger
from apidoc_validator.parser.annotation import AnnotationError, CodeBlockType, parse_annotation
from apidoc_validator.parser.base import Block, BlockKind
from apidoc_validator.tables import describe_rows, parse_table_spec

logger = get_logger("extractor")


@dataclass
class ScanState:
    """Carried state of one pass over a document's blocks."""

    page_title: str | None = None
    page_description: str | None = None
    previous_header: Block | None = None
    current_request: MethodDefinition | None = None
    request_count: int = 0
    headings: list[Block] = field(default_factory=list)

    def enclosing_section(self) -> str | None:
        """Text of the nearest open heading other than the table's own header."""
        for heading in reversed(self.headings):
            if heading is not self.previous_header:
                return heading.content
        return None


def extract(blocks: list[Block], display_name: str = "") -> tuple[list[Definition], list[Diagnostic]]:
    """Extract definitions from a tokenized document.

    Returns the definitions in document order and every diagnostic raised
    along the way. Problems with a single block are reported and the pass
    moves on to the next block.
    """
    state = ScanState()
    definitions: list[Definition] = []
    diagnostics: list[Diagnostic] = []
    source = display_name or None

    for i, block in enumerate(blocks):
        if block.kind is BlockKind.HEADING and state.page_title is None:
            state.page_title = block.content
            diagnostics.append(Diagnostic.message(source, f"Found page title: {block.content}"))
        elif block.kind is BlockKind.PARAGRAPH and state.page_description is None:
            state.page_description = block.content
            diagnostics.append(Diagnostic.message(source, f"Found page description: {block.content}"))
        elif block.kind is BlockKind.COMMENT:
            next_block = blocks[i + 1] if i + 1 < len(blocks) else None
            if next_block is not None and next_block.kind is BlockKind.CODE_BLOCK:
                definition = _interpret_code_block(block, next_block, state, display_name, diagnostics)
                if definition is not None and not any(d is definition for d in definitions):
                    definitions.append(definition)
        elif block.kind is BlockKind.TABLE and state.previous_header is not None:
            table, table_diagnostics = parse_table_spec(block, state.previous_header, source, state.enclosing_section())
            diagnostics.extend(table_diagnostics)
            diagnostics.append(
                Diagnostic.message(source, f"Found table: {table.table_type.value}. Rows:\n{describe_rows(table)}")
            )
            definitions.append(table)

        if block.kind is BlockKind.HEADING:
            while state.headings and state.headings[-1].level >= block.level:
                state.headings.pop()
            state.headings.append(block)
        if block.is_header_like:
            state.previous_header = block

    diagnostics.extend(attach(definitions, source))
    logger.debug("%s: %d definitions, %d diagnostics", display_name, len(definitions), len(diagnostics))
    return definitions, diagnostics


def _interpret_code_block(
    comment: Block,
    code: Block,
    state: ScanState,
    display_name: str,
    diagnostics: list[Diagnostic],
) -> Definition | None:
    """Turn an annotation + code block pair into a definition, or None."""
    source = display_name or None
    try:
        annotation = parse_annotation(comment.content)
    except AnnotationError as e:
        diagnostics.append(
            Diagnostic.error(
                ErrorCode.ANNOTATION_PARSER_ERROR,
                source,
                f"Invalid annotation on line {comment.line_number}: {e}",
            )
        )
        return None

    kind = annotation.kind
    if kind is CodeBlockType.RESOURCE:
        definition = ResourceDefinition(
            title=annotation.title or state.page_title,
            description=state.page_description,
            resource_type=annotation.resource_type,
            raw_body=code.content,
            owner_document=display_name,
        )
    elif kind is CodeBlockType.REQUEST:
        definition = MethodDefinition.from_request(code.content, annotation, display_name)
        if not definition.identifier:
            definition.identifier = f"{display_name} #{state.request_count}"
        definition.title = definition.title or state.page_title
        definition.description = state.page_description
        state.request_count += 1
        state.current_request = definition
    elif kind is CodeBlockType.RESPONSE:
        if state.current_request is None:
            diagnostics.append(
                Diagnostic.error(
                    ErrorCode.RESPONSE_WITHOUT_REQUEST,
                    source,
                    f"Response on line {code.line_number} has no preceding request in this document.",
                )
            )
            return None
        state.current_request.add_expected_response(code.content, annotation)
        definition = state.current_request
    elif kind is CodeBlockType.EXAMPLE:
        definition = ExampleDefinition(
            title=annotation.title or state.page_title,
            description=state.page_description,
            resource_type=annotation.resource_type,
            raw_body=code.content,
            owner_document=display_name,
        )
    elif kind is CodeBlockType.IGNORED:
        return None
    else:
        diagnostics.append(
            Diagnostic.error(
                ErrorCode.UNSUPPORTED_ANNOTATION_BLOCK_TYPE,
                source,
                f"Unsupported block type: {annotation.block_type}",
            )
        )
        return None

    diagnostics.append(
        Diagnostic.message(source, f"Found code block: {definition.title} [{type(definition).__name__}]")
    )
    return definition
