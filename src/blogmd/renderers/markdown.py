#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blogmd/renderers/markdown.py
"""Markdown rendering from document trees.

This module provides the MarkdownRenderer class which converts an editor
document tree to CommonMark/GFM text with ``$``/``$$`` math. The output is
the interchange form read back by ``blogmd.parsers.markdown``, so the
renderer favours text that re-imports to the same tree:

* plain text is whitespace-collapsed and backslash-escaped,
* adjacent text leaves that share marks stay inside one delimiter pair,
* consecutive lists of the same kind alternate their marker so they do not
  merge into one list when read back.

Rendering is a pure function of the tree and the options. Unknown node types
are dropped and never raise.

"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from typing import Callable, Iterator

from blogmd.ast.nodes import Mark, Node, sort_marks
from blogmd.ast.utils import merge_adjacent_text
from blogmd.ast.visitors import NodeVisitor
from blogmd.constants import (
    BLOCK_MATH,
    DEFAULT_HEADING_LEVEL,
    DEFAULT_ORDERED_LIST_START,
    DOC,
    HARD_BREAK,
    HORIZONTAL_RULE_MARKDOWN,
    IMAGE,
    INLINE_MATH,
    LIST_ITEM,
    LIST_NODE_TYPES,
    MARK_BOLD,
    MARK_CODE,
    MARK_ITALIC,
    MARK_LINK,
    MARK_STRIKE,
    MARK_UNDERLINE,
    MATH_NODE_TYPES,
    MAX_HEADING_LEVEL,
    ORDERED_LIST,
    PARAGRAPH,
    TABLE_CELL_TYPES,
    TABLE_ROW,
    TABLE_SEPARATOR_CELL,
    TEXT,
)
from blogmd.options.markdown import MarkdownRendererOptions
from blogmd.preprocessing.classifier import is_plain_text_dollar_span
from blogmd.preprocessing.math import block_math_marker, inline_math_marker
from blogmd.renderers.base import BaseRenderer
from blogmd.utils.escape import escape_line_starts, escape_markdown_text, escape_table_cell, longest_run
from blogmd.utils.frontmatter import format_yaml_frontmatter

logger = logging.getLogger(__name__)

INLINE_NODE_TYPES = frozenset({TEXT, INLINE_MATH, HARD_BREAK})

HARD_BREAK_MARKDOWN = "\\\n"

# Whitespace collapsed by the importer; non-breaking spaces are content
_COLLAPSIBLE_WHITESPACE = re.compile(r"[ \t\r\n\f]+")
_DESTINATION_NEEDS_BRACKETS = re.compile(r"[\s()<>]")
# Backslash-escaped in titles so quotes and math or code delimiters stay literal
_TITLE_ESCAPES = re.compile(r'([\\"`$~])')
_MAX_ORDERED_START = 999_999_999


def _coerce_int(value: object, default: int) -> int:
    """Return ``value`` as an int, or ``default`` when it is not integral."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return default
    return default


def _format_destination(url: str) -> str:
    """Format a link or image destination, bracketing it when needed."""
    url = url.replace("`", "%60").replace("$", "\\$")
    if _DESTINATION_NEEDS_BRACKETS.search(url):
        cleaned = url.replace("<", "%3C").replace(">", "%3E").replace("\n", "%0A").replace("\r", "%0D")
        return f"<{cleaned}>"
    return url


def _format_title(title: object) -> str:
    if not title:
        return ""
    escaped = _TITLE_ESCAPES.sub(r"\\\1", str(title)).replace("\n", " ")
    return f' "{escaped}"'


def _common_prefix_length(active: list[Mark], target: list[Mark]) -> int:
    depth = 0
    for current, wanted in zip(active, target):
        if current.type != wanted.type or current.attrs != wanted.attrs:
            break
        depth += 1
    return depth


def _trim_breaks(nodes: list[Node]) -> list[Node]:
    """Drop hard breaks at either end of an inline run; they cannot be written there."""
    start, end = 0, len(nodes)
    while start < end and nodes[start].type == HARD_BREAK:
        start += 1
    while end > start and nodes[end - 1].type == HARD_BREAK:
        end -= 1
    return nodes[start:end]


def _can_interrupt_paragraph(rendered_list: str) -> bool:
    """Return True when a rendered list may follow a paragraph line directly.

    CommonMark only lets a list interrupt a paragraph when its first item is
    non-empty and, for ordered lists, numbered 1.
    """
    first_line = rendered_list.split("\n", 1)[0]
    marker, _, rest = first_line.partition(" ")
    if not rest.strip():
        return False
    number = marker[:-1]
    return not number.isdigit() or int(number) == 1


def _ends_with_escape(text: str) -> bool:
    """Return True if ``text`` ends with an odd run of backslashes."""
    return (len(text) - len(text.rstrip("\\"))) % 2 == 1


def _ends_with_dollar_delimiter(markdown: str) -> bool:
    """Return True if ``markdown`` ends with a ``$`` that is not backslash-escaped."""
    return markdown.endswith("$") and not _ends_with_escape(markdown[:-1])


def _math_needs_marker(latex: str) -> bool:
    # Backticks and tilde fences would be scanned as code, a trailing
    # backslash would escape the closing delimiter
    return "`" in latex or "~~~" in latex or _ends_with_escape(latex)


def _inline_math_markdown(latex: str) -> str:
    """Write inline math as ``$latex$``, or as its marker element when that would not read back as math."""
    if not latex:
        return ""
    if "$" in latex or "\n" in latex or _math_needs_marker(latex) or is_plain_text_dollar_span(latex):
        return inline_math_marker(latex)
    return f"${latex}$"


def _block_math_markdown(latex: str, separator: str) -> str:
    if not latex:
        return ""
    if "$$" in latex or latex.startswith("$") or latex.endswith("$") or _math_needs_marker(latex):
        return block_math_marker(latex)
    return f"$${separator}{latex}{separator}$$"


def _indent_item(marker: str, body: str) -> str:
    if not body:
        return marker.rstrip()
    lines = body.split("\n")
    padding = " " * len(marker)
    rest = [padding + line if line else "" for line in lines[1:]]
    return "\n".join([marker + lines[0], *rest])


class MarkdownRenderer(NodeVisitor, BaseRenderer):
    """Render document trees to markdown text.

    Parameters
    ----------
    options : MarkdownRendererOptions or None, default = None
        Markdown formatting options

    Examples
    --------
        >>> from blogmd.ast import doc, heading
        >>> MarkdownRenderer().render_to_string(doc(heading(1, "Title")))
        '# Title'

    """

    def __init__(self, options: MarkdownRendererOptions | None = None):
        """Initialize the Markdown renderer with options."""
        BaseRenderer._validate_options_type(options, MarkdownRendererOptions, "markdown")
        options = options or MarkdownRendererOptions()
        BaseRenderer.__init__(self, options)
        self.options: MarkdownRendererOptions = options
        self._rewrite_image_src: Callable[[str], str] = options.rewrite_image_src or (lambda src: src)
        self._in_table: bool = False
        self._hard_break: str = HARD_BREAK_MARKDOWN
        self._nesting: int = 0

    def render_to_string(self, doc: Node) -> str:
        """Render a ``doc`` tree to markdown.

        Returns an empty string when the root is not a ``doc`` or has no
        content. Blocks are separated by one blank line and the result has
        no trailing newline.

        """
        if doc.type != DOC or not doc.children:
            return ""
        self._in_table = False
        self._hard_break = HARD_BREAK_MARKDOWN
        self._nesting = 0
        return self.visit(doc)

    # ------------------------------------------------------------------
    # Block nodes
    # ------------------------------------------------------------------

    def visit_doc(self, node: Node) -> str:
        parts = []
        frontmatter = node.attr("frontmatter")
        if self.options.render_frontmatter and isinstance(frontmatter, dict) and frontmatter:
            parts.append(format_yaml_frontmatter(frontmatter))
        parts.append(self._render_blocks(node.children))
        return "\n\n".join(part for part in parts if part)

    def visit_paragraph(self, node: Node) -> str:
        return self._finish_paragraph(self._render_inline(node.children))

    def visit_heading(self, node: Node) -> str:
        level = min(max(_coerce_int(node.attr("level"), DEFAULT_HEADING_LEVEL), 1), MAX_HEADING_LEVEL)

        saved_break, self._hard_break = self._hard_break, " "
        try:
            content = self._render_inline(node.children).strip()
        finally:
            self._hard_break = saved_break

        # A trailing "#" would read as a closing sequence
        if content.endswith("#"):
            content = content[:-1] + "\\#"
        return f"{'#' * level} {content}".rstrip()

    def visit_code_block(self, node: Node) -> str:
        code = "".join(child.text or "" for child in node.children if child.is_text)
        fence_char = self.options.code_fence_char
        fence = fence_char * max(self.options.code_fence_min, longest_run(code, fence_char) + 1)

        language = str(node.attr("language", "")).strip()
        if language:
            language = language.split()[0]
            if fence_char == "`":
                language = language.replace("`", "")

        if not code:
            return f"{fence}{language}\n{fence}"
        return f"{fence}{language}\n{code}\n{fence}"

    def visit_blockquote(self, node: Node) -> str:
        with self._nested():
            inner = self._render_blocks(node.children)
        if not inner:
            return ""
        return "\n".join(f"> {line}" if line else ">" for line in inner.split("\n"))

    def visit_bullet_list(self, node: Node) -> str:
        return self._render_list(node)

    def visit_ordered_list(self, node: Node) -> str:
        return self._render_list(node)

    def visit_list_item(self, node: Node) -> str:
        # A stray item outside a list renders as a single-item bullet list
        with self._nested():
            body = self._render_blocks(node.children, tight=True)
        return _indent_item(f"{self.options.bullet_marker} ", body)

    def visit_table(self, node: Node) -> str:
        saved = self._in_table, self._hard_break
        self._in_table, self._hard_break = True, " "
        try:
            with self._nested():
                rows = [
                    [self._render_cell(cell) for cell in row.children if cell.type in TABLE_CELL_TYPES]
                    for row in node.children
                    if row.type == TABLE_ROW
                ]
        finally:
            self._in_table, self._hard_break = saved

        num_cols = max((len(row) for row in rows), default=0)
        if num_cols == 0:
            return ""
        for row in rows:
            row.extend([""] * (num_cols - len(row)))

        lines = [self._table_line(rows[0]), self._table_line([TABLE_SEPARATOR_CELL] * num_cols)]
        lines.extend(self._table_line(row) for row in rows[1:])
        return "\n".join(lines)

    def visit_image(self, node: Node) -> str:
        src = str(node.attr("src", ""))
        alt = _COLLAPSIBLE_WHITESPACE.sub(" ", str(node.attr("alt", ""))).strip()
        url = self._rewrite_image_src(src)
        markdown = f"![{escape_markdown_text(alt)}]({_format_destination(url)}{_format_title(node.attr('title'))})"
        return escape_table_cell(markdown) if self._in_table else markdown

    def visit_horizontal_rule(self, node: Node) -> str:
        return HORIZONTAL_RULE_MARKDOWN

    def visit_block_math(self, node: Node) -> str:
        latex = str(node.attr("latex", "")).strip()
        # Continuation lines of nested blocks carry prefixes that would leak into the LaTeX
        if self._nesting:
            if "\n" in latex:
                return block_math_marker(latex)
            return _block_math_markdown(latex, separator="")
        return _block_math_markdown(latex, separator="\n")

    def generic_visit(self, node: Node) -> str:
        """Drop a node type without a markdown rule."""
        logger.debug("Skipping node type '%s' with no markdown rule", node.type)
        return ""

    # ------------------------------------------------------------------
    # Block helpers
    # ------------------------------------------------------------------

    def _render_blocks(self, nodes: list[Node], tight: bool = False) -> str:
        """Render a sequence of block children separated by blank lines.

        Inline nodes found at block level are rendered as an implicit
        paragraph. With ``tight``, a list directly after a paragraph is
        attached with a single newline (list item bodies).
        """
        output: list[str] = []
        previous_type: str | None = None
        alternate = False

        for block, block_type in self._group_inline_runs(nodes):
            if block_type in LIST_NODE_TYPES:
                alternate = not alternate if previous_type == block_type else False
                rendered = self._render_list(block[0], alternate=alternate)
            elif block_type == PARAGRAPH and block[0].type != PARAGRAPH:
                rendered = self._finish_paragraph(self._render_inline(block))
            else:
                rendered = self.visit(block[0])

            if not rendered:
                continue
            if output:
                attach = (
                    tight
                    and previous_type == PARAGRAPH
                    and block_type in LIST_NODE_TYPES
                    and _can_interrupt_paragraph(rendered)
                )
                output.append("\n" if attach else "\n\n")
            output.append(rendered)
            previous_type = block_type

        return "".join(output)

    @staticmethod
    def _group_inline_runs(nodes: list[Node]) -> list[tuple[list[Node], str]]:
        """Pair each block with its type, gathering stray inline nodes into paragraph runs."""
        groups: list[tuple[list[Node], str]] = []
        run: list[Node] = []
        for node in nodes:
            if node.type in INLINE_NODE_TYPES:
                run.append(node)
                continue
            if run:
                groups.append((run, PARAGRAPH))
                run = []
            groups.append(([node], node.type))
        if run:
            groups.append((run, PARAGRAPH))
        return groups

    def _finish_paragraph(self, content: str) -> str:
        content = content.strip(" ")
        if self.options.escape_special:
            content = escape_line_starts(content)
        return content

    def _render_list(self, node: Node, alternate: bool = False) -> str:
        ordered = node.type == ORDERED_LIST
        number = 0
        delimiter = ")" if alternate else "."
        bullet = self.options.bullet_marker
        if ordered:
            number = _coerce_int(node.attr("start"), DEFAULT_ORDERED_LIST_START)
            number = min(max(number, 0), _MAX_ORDERED_START)
        elif alternate:
            bullet = "*" if bullet != "*" else "-"

        items = []
        for item in node.children:
            if item.type != LIST_ITEM:
                logger.debug("Skipping '%s' node inside %s", item.type, node.type)
                continue
            marker = f"{number}{delimiter} " if ordered else f"{bullet} "
            number += 1
            with self._nested():
                body = self._render_blocks(item.children, tight=True)
            items.append(_indent_item(marker, body))
        return "\n".join(items)

    def _render_cell(self, cell: Node) -> str:
        rendered = self._render_blocks(cell.children)
        flat = re.sub(r"\s*\n\s*", " ", rendered).strip()
        if self.options.escape_special:
            flat = escape_line_starts(flat)
        return flat

    @contextmanager
    def _nested(self) -> Iterator[None]:
        self._nesting += 1
        try:
            yield
        finally:
            self._nesting -= 1

    @staticmethod
    def _table_line(cells: list[str]) -> str:
        return "| " + " | ".join(cells) + " |"

    # ------------------------------------------------------------------
    # Inline content
    # ------------------------------------------------------------------

    def _render_inline(self, nodes: list[Node]) -> str:
        """Render inline children, keeping shared marks open across leaves.

        Marks are opened in canonical order (link outermost, code innermost).
        When the next leaf shares a prefix of the open marks only the marks
        past that prefix are closed, so ``**a _b_ c**`` stays one bold span.
        Whitespace at the edge of a marked leaf is moved outside the
        delimiters so emphasis always flanks text.
        """
        parts: list[str] = []
        active: list[Mark] = []
        pending_space = False
        line_start = True

        leaves = _trim_breaks(merge_adjacent_text(nodes))
        for index, node in enumerate(leaves):
            lead = trail = False
            if node.is_text:
                marks = sort_marks(node.marks)
                outer = [mark for mark in marks if mark.type != MARK_CODE]
                if any(mark.type == MARK_CODE for mark in marks):
                    core = self._code_span(node.text or "")
                else:
                    collapsed = _COLLAPSIBLE_WHITESPACE.sub(" ", node.text or "")
                    stripped = collapsed.strip(" ")
                    if not stripped:
                        pending_space = pending_space or bool(collapsed)
                        continue
                    lead, trail = collapsed.startswith(" "), collapsed.endswith(" ")
                    core = self._escape_text(stripped)
            elif node.type == HARD_BREAK and self._hard_break == " ":
                pending_space = True
                continue
            else:
                core = self._render_inline_leaf(node)
                if not core:
                    continue
                outer = []

            depth = _common_prefix_length(active, outer)
            while len(active) > depth:
                parts.append(self._close_mark(active.pop()))

            is_break = node.type == HARD_BREAK
            if (pending_space or lead) and not line_start and not is_break:
                parts.append(" ")

            # Two "$" side by side would read as a "$$" block delimiter, and a
            # trailing backslash would escape the opening one
            if node.type in MATH_NODE_TYPES and core.startswith("$"):
                preceding = "".join(parts[-2:])
                following = leaves[index + 1] if index + 1 < len(leaves) else None
                if (
                    _ends_with_dollar_delimiter(preceding)
                    or _ends_with_escape(preceding)
                    or self._starts_with_dollar(following)
                ):
                    core = self._math_marker(node)

            for mark in outer[depth:]:
                parts.append(self._open_mark(mark))
                active.append(mark)
            parts.append(core)

            pending_space = trail
            line_start = is_break

        while active:
            parts.append(self._close_mark(active.pop()))
        return "".join(parts)

    def _render_inline_leaf(self, node: Node) -> str:
        if node.type == INLINE_MATH:
            return _inline_math_markdown(str(node.attr("latex", "")).strip())
        if node.type == HARD_BREAK:
            return self._hard_break
        if node.type == IMAGE:
            return self.visit_image(node)
        if node.type == BLOCK_MATH:
            return _block_math_markdown(str(node.attr("latex", "")).strip(), separator="")
        logger.debug("Skipping inline node type '%s' with no markdown rule", node.type)
        return ""

    @staticmethod
    def _math_marker(node: Node) -> str:
        latex = str(node.attr("latex", "")).strip()
        return inline_math_marker(latex) if node.type == INLINE_MATH else block_math_marker(latex)

    def _starts_with_dollar(self, node: Node | None) -> bool:
        """Return True if ``node`` renders with a leading bare ``$``.

        Escaped text always writes ``\\$``, so only unescaped plain text can.
        """
        if node is None or self.options.escape_special:
            return False
        return node.is_text and not node.marks and (node.text or "").startswith("$")

    def _escape_text(self, text: str) -> str:
        if self.options.escape_special:
            text = escape_markdown_text(text)
        if self._in_table:
            text = escape_table_cell(text)
        return text

    def _code_span(self, content: str) -> str:
        content = content.replace("\r\n", " ").replace("\n", " ")
        if self._in_table and "|" in content:
            # Backslashes stay literal in code spans, so "\|" would keep its backslash
            escaped = escape_markdown_text(content.replace("&", "&amp;")).replace("|", "&#124;")
            return f"<code>{escaped}</code>"
        fence = "`" * (longest_run(content, "`") + 1)
        # One space on each side is stripped when reading, so pad when the
        # content starts or ends with a backtick or is itself space-padded
        if (
            content.startswith("`")
            or content.endswith("`")
            or (content.startswith(" ") and content.endswith(" ") and content.strip(" "))
        ):
            content = f" {content} "
        return f"{fence}{content}{fence}"

    def _open_mark(self, mark: Mark) -> str:
        if mark.type == MARK_BOLD:
            return "**"
        if mark.type == MARK_ITALIC:
            return self.options.emphasis_symbol
        if mark.type == MARK_STRIKE:
            return "~~"
        if mark.type == MARK_UNDERLINE:
            return "<u>"
        if mark.type == MARK_LINK:
            return "["
        logger.debug("Ignoring unsupported mark '%s'", mark.type)
        return ""

    def _close_mark(self, mark: Mark) -> str:
        if mark.type == MARK_LINK:
            href = str(mark.attrs.get("href") or "")
            closing = f"]({_format_destination(href)}{_format_title(mark.attrs.get('title'))})"
            return escape_table_cell(closing) if self._in_table else closing
        if mark.type == MARK_UNDERLINE:
            return "</u>"
        return self._open_mark(mark) if mark.type in (MARK_BOLD, MARK_ITALIC, MARK_STRIKE) else ""


def serialize(root: Node, options: MarkdownRendererOptions | None = None) -> str:
    """Serialize a ``doc`` tree to markdown.

    Parameters
    ----------
    root : Node
        Document root; anything other than a non-empty ``doc`` yields ``""``
    options : MarkdownRendererOptions or None, default None
        Rendering options, including the ``rewrite_image_src`` hook

    Returns
    -------
    str
        Markdown with ``$``/``$$`` math and no trailing newline

    Examples
    --------
        >>> from blogmd.ast import doc, image
        >>> serialize(doc(image("https://example.com/img.png", alt="photo")))
        '![photo](https://example.com/img.png)'

    """
    return MarkdownRenderer(options).render_to_string(root)
