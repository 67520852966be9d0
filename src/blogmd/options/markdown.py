#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for markdown serialization and parsing.

This module defines the options used when serializing document trees to
markdown and when reconstructing trees from markdown.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Optional

from blogmd.constants import (
    DEFAULT_BULLET_MARKER,
    DEFAULT_CODE_FENCE_CHAR,
    DEFAULT_CODE_FENCE_MIN,
    DEFAULT_EMPHASIS_SYMBOL,
    BulletMarker,
    CodeFenceChar,
    EmphasisSymbol,
)
from blogmd.options.base import BaseParserOptions, BaseRendererOptions

if TYPE_CHECKING:
    from blogmd.parsers.bridge import MarkupBridge
    from blogmd.schema import Schema


@dataclass(frozen=True)
class MarkdownRendererOptions(BaseRendererOptions):
    """Configuration options for tree -> markdown serialization.

    Parameters
    ----------
    rewrite_image_src : callable or None, default None
        Applied to every image URL before it is written. ``None`` keeps URLs
        unchanged. See ``blogmd.utils.images.make_export_image_rewriter``
        for the export rule that relativizes storage URLs.
    bullet_marker : {"-", "*", "+"}, default "-"
        Marker for bullet list items.
    emphasis_symbol : {"_", "*"}, default "_"
        Delimiter for italic text.
    code_fence_char : {"`", "~"}, default "`"
        Character used for code block fences.
    code_fence_min : int, default 3
        Minimum fence length; fences grow past any run inside the code.
    escape_special : bool, default True
        Backslash-escape markdown punctuation in plain text so it is not
        reinterpreted as markup when the output is parsed again.

    """

    rewrite_image_src: Optional[Callable[[str], str]] = field(
        default=None,
        metadata={"help": "Callable applied to every image URL (identity when unset)", "exclude_from_cli": True},
    )
    bullet_marker: BulletMarker = field(
        default=DEFAULT_BULLET_MARKER,
        metadata={"help": "Bullet list marker", "choices": ["-", "*", "+"]},
    )
    emphasis_symbol: EmphasisSymbol = field(
        default=DEFAULT_EMPHASIS_SYMBOL,
        metadata={"help": "Italic delimiter", "choices": ["_", "*"]},
    )
    code_fence_char: CodeFenceChar = field(
        default=DEFAULT_CODE_FENCE_CHAR,
        metadata={"help": "Code block fence character", "choices": ["`", "~"]},
    )
    code_fence_min: int = field(
        default=DEFAULT_CODE_FENCE_MIN,
        metadata={"help": "Minimum code fence length", "type": int},
    )
    escape_special: bool = field(
        default=True,
        metadata={"help": "Escape markdown punctuation in plain text", "cli_name": "no-escape-special"},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.bullet_marker not in ("-", "*", "+"):
            raise ValueError(f"bullet_marker must be one of '-', '*', '+', got {self.bullet_marker!r}")
        if self.emphasis_symbol not in ("_", "*"):
            raise ValueError(f"emphasis_symbol must be '_' or '*', got {self.emphasis_symbol!r}")
        if self.code_fence_char not in ("`", "~"):
            raise ValueError(f"code_fence_char must be '`' or '~', got {self.code_fence_char!r}")
        if self.code_fence_min < 3:
            raise ValueError(f"code_fence_min must be at least 3, got {self.code_fence_min}")
        if self.rewrite_image_src is not None and not callable(self.rewrite_image_src):
            raise ValueError("rewrite_image_src must be callable")


@dataclass(frozen=True)
class MarkdownParserOptions(BaseParserOptions):
    """Configuration options for markdown -> tree reconstruction.

    Parameters
    ----------
    bridge : MarkupBridge or None, default None
        Render-and-map capability. ``None`` loads the default
        mistune + BeautifulSoup bridge on first use.
    schema : Schema or None, default None
        Type registry the markup is mapped against. ``None`` uses the
        default post schema.
    parse_tables : bool, default True
        Enable GFM pipe tables in the default bridge.
    parse_strikethrough : bool, default True
        Enable ``~~strike~~`` in the default bridge.
    preprocess_math : bool, default True
        Rewrite ``$``/``$$`` math into marker elements before rendering.

    """

    bridge: Optional["MarkupBridge"] = field(
        default=None,
        metadata={"help": "Markup bridge (render + schema parse)", "exclude_from_cli": True},
    )
    schema: Optional["Schema"] = field(
        default=None,
        metadata={"help": "Document schema", "exclude_from_cli": True},
    )
    parse_tables: bool = field(
        default=True,
        metadata={"help": "Parse GFM pipe tables", "cli_name": "no-parse-tables"},
    )
    parse_strikethrough: bool = field(
        default=True,
        metadata={"help": "Parse ~~strikethrough~~", "cli_name": "no-parse-strikethrough"},
    )
    preprocess_math: bool = field(
        default=True,
        metadata={"help": "Convert $...$ and $$...$$ math before rendering", "cli_name": "no-preprocess-math"},
    )
