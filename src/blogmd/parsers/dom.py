#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blogmd/parsers/dom.py
"""Schema-driven mapping of a BeautifulSoup tree to a document tree.

The mapper walks the markup the way an editor's DOM parser does: elements
matched by a node rule become nodes, elements matched by a mark rule add a
mark to the text beneath them, and anything else is transparent (its
children are read in place). Content is then fitted to the schema:

* inline content directly inside a block container is wrapped in paragraphs,
* block nodes found inside a textblock (an image in a ``<p>``) are lifted
  out, splitting the textblock around them,
* empty containers receive an empty paragraph, and list items always start
  with one,
* whitespace outside code is collapsed and trimmed at block edges.

"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

from blogmd.ast.nodes import Mark, Node, sort_marks
from blogmd.ast.utils import merge_adjacent_text
from blogmd.constants import DOC, HARD_BREAK, LIST_ITEM, MARK_CODE, PARAGRAPH, TEXT
from blogmd.schema import DEFAULT_SCHEMA, NodeSpec, Schema

logger = logging.getLogger(__name__)

_COLLAPSIBLE_WHITESPACE = re.compile(r"[ \t\r\n\f]+")

IGNORED_ELEMENTS = frozenset({"script", "style", "head", "template"})

# Unmatched elements that hold blocks rather than inline content
BLOCK_CONTAINER_ELEMENTS = frozenset(
    {
        "address",
        "article",
        "aside",
        "body",
        "center",
        "details",
        "div",
        "dl",
        "dd",
        "dt",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "header",
        "html",
        "main",
        "nav",
        "section",
        "summary",
        "tbody",
        "tfoot",
        "thead",
    }
)


def _paragraph(content: Optional[list[Node]] = None) -> Node:
    return Node(PARAGRAPH, content=content or [])


class SchemaDOMParser:
    """Map parsed markup to a document tree using a ``Schema``.

    Parameters
    ----------
    schema : Schema, default = DEFAULT_SCHEMA
        Node and mark vocabulary to map against

    Examples
    --------
        >>> from bs4 import BeautifulSoup
        >>> soup = BeautifulSoup("<p>Hello <strong>world</strong></p>", "html.parser")
        >>> SchemaDOMParser().parse(soup).to_dict()["content"][0]["content"][1]
        {'type': 'text', 'marks': [{'type': 'bold'}], 'text': 'world'}

    """

    def __init__(self, schema: Schema | None = None):
        self.schema = schema or DEFAULT_SCHEMA

    def parse(self, root: BeautifulSoup | Tag) -> Node:
        """Map ``root`` and its descendants to a ``doc`` node."""
        blocks = self._block_children(root)
        return Node(DOC, content=blocks or [_paragraph()])

    # ------------------------------------------------------------------
    # Block context
    # ------------------------------------------------------------------

    def _block_children(self, element: Tag) -> list[Node]:
        """Map the children of a block container to block nodes."""
        blocks: list[Node] = []
        buffer: list[Node] = []

        def flush() -> None:
            if buffer:
                blocks.extend(self._fit_textblock(PARAGRAPH, {}, buffer, keep_empty=False))
                buffer.clear()

        for child in element.children:
            if isinstance(child, PreformattedString):
                continue
            if isinstance(child, NavigableString):
                value = str(child)
                # Whitespace between blocks is layout, not content
                if value and (buffer or value.strip()):
                    buffer.append(Node(TEXT, text=value))
                continue
            if not isinstance(child, Tag) or child.name in IGNORED_ELEMENTS:
                continue

            matched = self.schema.match_node(child)
            if matched is not None:
                spec, attrs = matched
                if spec.group == "inline":
                    buffer.extend(self._build_inline(spec, attrs))
                else:
                    flush()
                    blocks.extend(self._build(spec, attrs, child))
                continue

            mark = self._match_mark(child)
            if mark is not None:
                buffer.extend(self._inline_children(child, [mark]))
            elif child.name in BLOCK_CONTAINER_ELEMENTS:
                flush()
                blocks.extend(self._block_children(child))
            else:
                buffer.extend(self._inline_children(child, []))

        flush()
        return blocks

    def _build(self, spec: NodeSpec, attrs: dict[str, Any], element: Tag) -> list[Node]:
        """Build the node for a matched non-inline element.

        Returns a list because a textblock may be split by lifted blocks.
        """
        if spec.is_leaf:
            return [Node(spec.name, attrs=attrs)]
        if spec.content == "inline":
            return self._fit_textblock(spec.name, attrs, self._inline_children(element, []), keep_empty=True)
        if spec.content == "text":
            return [self._build_code_block(spec, attrs, element)]
        if spec.content == "block":
            content = self._block_children(element)
            if spec.leading_paragraph and (not content or content[0].type != PARAGRAPH):
                content.insert(0, _paragraph())
            return [Node(spec.name, attrs=attrs, content=content or [_paragraph()])]
        if spec.content == "list_item":
            return [Node(spec.name, attrs=attrs, content=self._list_items(element))]
        if spec.content == "table_row":
            rows = self._collect(element, "table_row")
            if not rows:
                logger.debug("Dropping <%s> with no rows", element.name)
                return []
            return [Node(spec.name, attrs=attrs, content=rows)]
        if spec.content == "table_cell":
            return [Node(spec.name, attrs=attrs, content=self._collect(element, "table_cell"))]
        logger.debug("Unsupported content kind '%s' for node '%s'", spec.content, spec.name)
        return []

    def _build_code_block(self, spec: NodeSpec, attrs: dict[str, Any], element: Tag) -> Node:
        code = element.get_text()
        if code.endswith("\n"):
            code = code[:-1]
        return Node(spec.name, attrs=attrs, content=[Node(TEXT, text=code)] if code else [])

    def _list_items(self, element: Tag) -> list[Node]:
        """Map list children to list items, wrapping stray content in an item."""
        items: list[Node] = []
        for child in element.children:
            if isinstance(child, PreformattedString):
                continue
            if isinstance(child, NavigableString):
                if str(child).strip():
                    items.append(Node(LIST_ITEM, content=[_paragraph([Node(TEXT, text=str(child).strip())])]))
                continue
            if not isinstance(child, Tag) or child.name in IGNORED_ELEMENTS:
                continue
            matched = self.schema.match_node(child)
            if matched is not None and matched[0].group == "list_item":
                items.extend(self._build(matched[0], matched[1], child))
                continue
            content = self._element_as_blocks(child)
            if not content or content[0].type != PARAGRAPH:
                content.insert(0, _paragraph())
            items.append(Node(LIST_ITEM, content=content))
        return items or [Node(LIST_ITEM, content=[_paragraph()])]

    def _element_as_blocks(self, element: Tag) -> list[Node]:
        """Map a single element to block nodes, wrapping inline content in a paragraph."""
        matched = self.schema.match_node(element)
        if matched is not None and matched[0].group == "block":
            return self._build(matched[0], matched[1], element)
        if matched is not None and matched[0].group == "inline":
            items = self._build_inline(matched[0], matched[1])
        else:
            mark = self._match_mark(element)
            items = self._inline_children(element, [mark] if mark is not None else [])
        return self._fit_textblock(PARAGRAPH, {}, items, keep_empty=False)

    def _collect(self, element: Tag, group: str) -> list[Node]:
        """Gather nodes of ``group`` among descendants, looking through transparent wrappers."""
        found: list[Node] = []
        for child in element.children:
            if not isinstance(child, Tag) or child.name in IGNORED_ELEMENTS:
                continue
            matched = self.schema.match_node(child)
            if matched is None:
                found.extend(self._collect(child, group))
            elif matched[0].group == group:
                found.extend(self._build(matched[0], matched[1], child))
            else:
                logger.debug("Skipping <%s> where %s content is expected", child.name, group)
        return found

    # ------------------------------------------------------------------
    # Inline context
    # ------------------------------------------------------------------

    def _inline_children(self, element: Tag, marks: list[Mark]) -> list[Node]:
        """Map inline content; block nodes met here are returned in place for lifting."""
        items: list[Node] = []
        for child in element.children:
            if isinstance(child, PreformattedString):
                continue
            if isinstance(child, NavigableString):
                value = str(child)
                if value:
                    items.append(Node(TEXT, text=value, marks=sort_marks(list(marks))))
                continue
            if not isinstance(child, Tag) or child.name in IGNORED_ELEMENTS:
                continue

            matched = self.schema.match_node(child)
            if matched is not None:
                spec, attrs = matched
                if spec.group == "inline":
                    items.extend(self._build_inline(spec, attrs))
                elif spec.group == "block":
                    items.extend(self._build(spec, attrs, child))
                else:
                    items.extend(self._inline_children(child, marks))
                continue

            mark = self._match_mark(child)
            if mark is not None:
                items.extend(self._inline_children(child, [*marks, mark]))
            elif child.name in BLOCK_CONTAINER_ELEMENTS:
                items.extend(self._block_children(child))
            else:
                items.extend(self._inline_children(child, marks))
        return items

    def _build_inline(self, spec: NodeSpec, attrs: dict[str, Any]) -> list[Node]:
        if spec.name == TEXT:
            return []
        return [Node(spec.name, attrs=attrs)]

    def _match_mark(self, element: Tag) -> Optional[Mark]:
        matched = self.schema.match_mark(element)
        if matched is None:
            return None
        spec, attrs = matched
        return Mark(spec.name, attrs)

    # ------------------------------------------------------------------
    # Fitting
    # ------------------------------------------------------------------

    def _fit_textblock(self, node_type: str, attrs: dict[str, Any], items: list[Node], keep_empty: bool) -> list[Node]:
        """Split ``items`` into textblocks around lifted block nodes.

        The first segment keeps ``node_type``; segments after a lifted block
        become paragraphs. Segments left empty by a split are dropped; an
        element with no blocks inside stays even when empty if ``keep_empty``.
        """
        result: list[Node] = []
        run: list[Node] = []
        segment_type, segment_attrs = node_type, attrs
        lifted = False

        def close_run() -> None:
            nonlocal segment_type, segment_attrs
            content = self._normalize_inline(run)
            if content:
                result.append(Node(segment_type, attrs=segment_attrs, content=content))
            segment_type, segment_attrs = PARAGRAPH, {}
            run.clear()

        for item in items:
            if self.schema.is_inline(item.type):
                run.append(item)
            else:
                close_run()
                result.append(item)
                lifted = True
        close_run()

        if not result and keep_empty and not lifted:
            result.append(Node(node_type, attrs=attrs, content=[]))
        return result

    @staticmethod
    def _normalize_inline(items: list[Node]) -> list[Node]:
        """Collapse and trim whitespace the way an editor's DOM parser does.

        Runs of whitespace become one space; a space is dropped at the start
        of a block, after a hard break, or after text ending in a space, and
        trailing spaces at the end of the block are removed. Text marked as
        code keeps its whitespace.
        """
        result: list[Node] = []
        for node in items:
            if node.is_text and not node.has_mark(MARK_CODE):
                value = _COLLAPSIBLE_WHITESPACE.sub(" ", node.text or "")
                previous = result[-1] if result else None
                if value.startswith(" ") and (
                    previous is None
                    or previous.type == HARD_BREAK
                    or (previous.is_text and (previous.text or "").endswith(" "))
                ):
                    value = value[1:]
                if not value:
                    continue
                node = Node(TEXT, text=value, marks=node.marks)
            result.append(node)

        while result and result[-1].is_text and not result[-1].has_mark(MARK_CODE):
            last = result[-1]
            stripped = (last.text or "").rstrip(" ")
            if stripped:
                result[-1] = Node(TEXT, text=stripped, marks=last.marks)
                break
            result.pop()

        return merge_adjacent_text(result)
