"""Code block annotations.

An annotation is an HTML comment holding a JSON object, placed directly
above a fenced code block to say what the code block contains:

    <!-- { "blockType": "request", "name": "get-drive" } -->
    ```http
    GET /drive HTTP/1.1
    ```
"""

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"


class CodeBlockType(str, Enum):
    RESOURCE = "resource"
    REQUEST = "request"
    RESPONSE = "response"
    EXAMPLE = "example"
    IGNORED = "ignored"


class AnnotationError(ValueError):
    """Raised when a comment block does not hold a valid annotation."""


class Annotation(BaseModel):
    """Metadata describing the code block that follows it."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    block_type: str = Field(alias="blockType")
    title: str | None = None
    resource_type: str | None = Field(
        default=None, validation_alias=AliasChoices("@odata.type", "resourceType", "resource_type")
    )
    method_name: str | None = Field(
        default=None, validation_alias=AliasChoices("name", "method", "method_name")
    )
    optional_properties: list[str] = Field(default_factory=list, alias="optionalProperties")
    truncated: bool = False
    is_collection: bool = Field(default=False, alias="isCollection")
    expect_error: bool = Field(default=False, alias="expectError")

    @property
    def kind(self) -> CodeBlockType | None:
        """The block type as a known CodeBlockType, or None when unrecognized."""
        try:
            return CodeBlockType(self.block_type.strip().lower())
        except ValueError:
            return None


def parse_annotation(comment: str) -> Annotation:
    """Parse the JSON payload of an HTML comment block into an Annotation."""
    text = comment.strip()
    if not (text.startswith(COMMENT_OPEN) and text.endswith(COMMENT_CLOSE)):
        raise AnnotationError("block is not an HTML comment")

    payload = text[len(COMMENT_OPEN):-len(COMMENT_CLOSE)].strip()
    if not payload:
        raise AnnotationError("comment is empty")

    try:
        return Annotation.model_validate_json(payload)
    except ValidationError as e:
        raise AnnotationError(_summarize(e)) from e


def _summarize(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    if location:
        return f"{location}: {first['msg']}"
    return first["msg"]
