"""Template engine domain models.

Pydantic models exchanged with callers (placeholders, requisites, options)
and the frozen value types used while a paragraph is being rewritten.
"""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field

# Sentinels meaning "keep what the template already has".
PRESERVE_FONT = "preserve"
PRESERVE_SIZE = -1


class PlaceholderToken(BaseModel):
    """A named substitution point found in a template."""

    name: str = Field(description="Token name without the leading '#'")
    value: str = Field(default="", description="Value substituted for the token")
    position: int = Field(default=0, description="Offset of the first occurrence in the rendered text")


class RequisiteLine(BaseModel):
    """One free-text line taken from a requisites document."""

    id: int = Field(description="Sequence index of the line")
    value: str = Field(description="Raw line text")


class DocumentOptions(BaseModel):
    """Output options for a generated document."""

    font_family: str = Field(
        default=PRESERVE_FONT,
        description="Font applied to every text run, or 'preserve'.",
    )
    font_size: float = Field(
        default=PRESERVE_SIZE,
        description="Font size in points, or -1 to keep the original size.",
    )
    export_pdf: bool = Field(default=False, description="Also request a PDF rendition")
    output_file_name: str | None = Field(default=None, description="Explicit output file name")

    @property
    def applies_font(self) -> bool:
        return bool(self.font_family) and self.font_family != PRESERVE_FONT

    @property
    def applies_size(self) -> bool:
        return self.font_size > 0

    @property
    def is_preserve(self) -> bool:
        """True when neither font nor size is overridden."""
        return not self.applies_font and not self.applies_size


class FormatKind(Enum):
    """How a character's formatting is carried through a rewrite."""

    SCALAR = "scalar"
    PRESERVED = "preserved"


@dataclass(frozen=True)
class PreservedBlock:
    """Serialized run properties of one source run.

    ``ident`` distinguishes runs whose properties look identical; two
    characters share a block only if they came from the same source run
    (or from a token whose marker was in that run).
    """

    ident: int
    xml: bytes


@dataclass(frozen=True)
class CharacterFormat:
    """Formatting attached to one position of a flattened paragraph."""

    kind: FormatKind = FormatKind.SCALAR
    bold: bool = False
    italic: bool = False
    underline: bool = False
    color: str | None = None
    block: PreservedBlock | None = None

    @classmethod
    def scalar(
        cls,
        bold: bool = False,
        italic: bool = False,
        underline: bool = False,
        color: str | None = None,
    ) -> "CharacterFormat":
        return cls(FormatKind.SCALAR, bold, italic, underline, color, None)

    @classmethod
    def preserved(
        cls,
        block: PreservedBlock,
        bold: bool = False,
        italic: bool = False,
        underline: bool = False,
        color: str | None = None,
    ) -> "CharacterFormat":
        return cls(FormatKind.PRESERVED, bold, italic, underline, color, block)

    def merge_key(self) -> tuple:
        """Key under which adjacent characters may share one run."""
        if self.kind is FormatKind.PRESERVED:
            return (FormatKind.PRESERVED, self.block.ident)
        return (FormatKind.SCALAR, self.bold, self.italic, self.underline, self.color)


DEFAULT_FORMAT = CharacterFormat.scalar()


@dataclass(frozen=True)
class FlatParagraph:
    """A paragraph reduced to a character stream.

    Attributes:
        text: Visible characters; tabs, line and page breaks are single
            control characters.
        formats: One CharacterFormat per character of ``text``.
    """

    text: str
    formats: tuple[CharacterFormat, ...]

    def __post_init__(self) -> None:
        if len(self.text) != len(self.formats):
            raise ValueError(
                f"Text length {len(self.text)} does not match "
                f"format count {len(self.formats)}"
            )


@dataclass(frozen=True)
class RunGroup:
    """A maximal stretch of characters sharing one format."""

    text: str
    format: CharacterFormat
