#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blogmd/api.py
"""High-level conversion entry points.

``to_markdown`` and ``from_markdown`` accept either a prepared options
object or individual option fields as keyword arguments; keyword arguments
override fields of the options object.
"""

from __future__ import annotations

import logging
from dataclasses import fields
from typing import Any, Mapping, Optional, TypeVar, Union

from blogmd.ast.nodes import Node
from blogmd.ast.serialization import dict_to_node, json_to_ast
from blogmd.exceptions import ValidationError
from blogmd.options.base import BaseParserOptions, BaseRendererOptions
from blogmd.options.markdown import MarkdownParserOptions, MarkdownRendererOptions
from blogmd.parsers.base import ParserInput
from blogmd.parsers.markdown import parse
from blogmd.renderers.markdown import serialize
from blogmd.utils.images import make_export_image_rewriter

logger = logging.getLogger(__name__)

OptionsT = TypeVar("OptionsT", BaseParserOptions, BaseRendererOptions)

TreeSource = Union[Node, Mapping[str, Any], str]


def _create_options_from_kwargs(options_class: type[OptionsT], base: Optional[OptionsT], **kwargs: Any) -> OptionsT:
    """Overlay keyword arguments on ``base`` (or the class defaults).

    Unknown keyword arguments are skipped with a debug message.
    """
    option_names = {field.name for field in fields(options_class)}
    valid_kwargs = {k: v for k, v in kwargs.items() if k in option_names}
    missing = [k for k in kwargs if k not in valid_kwargs]
    if missing:
        logger.debug("Skipping unknown %s options: %s", options_class.__name__, missing)

    if base is None:
        return options_class(**valid_kwargs)
    return base.create_updated(**valid_kwargs) if valid_kwargs else base


def _resolve_tree(source: TreeSource) -> Node:
    if isinstance(source, Node):
        return source
    if isinstance(source, str):
        return json_to_ast(source)
    if isinstance(source, Mapping):
        return dict_to_node(source)
    raise ValidationError(
        f"Expected a Node, editor JSON dict or JSON string, got {type(source).__name__}",
        parameter_name="source",
        parameter_value=source,
    )


def to_markdown(
    source: TreeSource,
    *,
    renderer_options: Optional[MarkdownRendererOptions] = None,
    **kwargs: Any,
) -> str:
    """Serialize an editor document to markdown.

    Parameters
    ----------
    source : Node, dict or str
        Document tree, its editor-JSON dict, or that dict as a JSON string
    renderer_options : MarkdownRendererOptions, optional
        Pre-configured serializer options
    kwargs : Any
        Individual ``MarkdownRendererOptions`` fields

    Returns
    -------
    str
        Markdown without a trailing newline

    Examples
    --------
        >>> to_markdown({"type": "doc", "content": [{"type": "horizontalRule"}]})
        '---'

    """
    options = _create_options_from_kwargs(MarkdownRendererOptions, renderer_options, **kwargs)
    return serialize(_resolve_tree(source), options)


def export_markdown(
    source: TreeSource,
    *,
    images_prefix: str | None = None,
    images_target: str | None = None,
    **kwargs: Any,
) -> str:
    """Serialize a stored post for download, relativizing storage image URLs."""
    rewriter = make_export_image_rewriter(
        **{k: v for k, v in (("prefix", images_prefix), ("target", images_target)) if v is not None}
    )
    return to_markdown(source, rewrite_image_src=rewriter, **kwargs)


async def from_markdown(
    source: ParserInput,
    *,
    parser_options: Optional[MarkdownParserOptions] = None,
    **kwargs: Any,
) -> Node:
    """Reconstruct an editor document from markdown.

    Parameters
    ----------
    source : str, bytes, Path or file-like
        Markdown text; a ``str`` is content, never a path
    parser_options : MarkdownParserOptions, optional
        Pre-configured parser options
    kwargs : Any
        Individual ``MarkdownParserOptions`` fields

    Raises
    ------
    ParsingError
        If the markup bridge fails
    DependencyError
        If the default bridge's libraries are missing

    """
    options = _create_options_from_kwargs(MarkdownParserOptions, parser_options, **kwargs)
    return await parse(source, options)


__all__ = ["export_markdown", "from_markdown", "to_markdown"]
