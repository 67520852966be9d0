#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blogmd/renderers/base.py
"""Base classes for document tree renderers.

This module defines the abstract base class that renderers inherit from,
providing option validation and output writing.

"""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Any, Union

from blogmd.ast.nodes import Node
from blogmd.exceptions import InvalidOptionsError, RenderingError
from blogmd.options.base import BaseRendererOptions


class BaseRenderer(ABC):
    """Abstract base class for document tree renderers.

    Parameters
    ----------
    options : BaseRendererOptions or None, default = None
        Format-specific rendering options

    """

    def __init__(self, options: BaseRendererOptions | None = None):
        """Initialize the renderer with optional configuration."""
        self.options = options

    @staticmethod
    def _validate_options_type(options: Any, expected_type: type, renderer_name: str) -> None:
        """Reject options objects of the wrong class.

        Raises
        ------
        InvalidOptionsError
            If ``options`` is not None and not an instance of ``expected_type``

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                converter_name=f"{renderer_name} renderer",
                expected_type=expected_type,
                received_type=type(options),
            )

    @abstractmethod
    def render_to_string(self, doc: Node) -> str:
        """Render the tree to a string.

        Parameters
        ----------
        doc : Node
            ``doc`` root node

        Returns
        -------
        str
            Rendered document

        """

    def render(self, doc: Node, output: Union[str, Path, IO[bytes], IO[str]]) -> None:
        """Render the tree and write it to a path or file-like object.

        Parameters
        ----------
        doc : Node
            ``doc`` root node
        output : str, Path, or file-like
            Destination; binary streams receive UTF-8 bytes

        Raises
        ------
        RenderingError
            If the output cannot be written

        """
        text = self.render_to_string(doc)
        try:
            if isinstance(output, (str, Path)):
                Path(output).write_text(text, encoding="utf-8")
            elif _is_binary_stream(output):
                output.write(text.encode("utf-8"))  # type: ignore[arg-type]
            else:
                output.write(text)  # type: ignore[arg-type]
        except OSError as e:
            raise RenderingError(f"Failed to write rendered output: {e}", rendering_stage="write", original_error=e) from e


def _is_binary_stream(output: Any) -> bool:
    """Return True when ``output`` expects bytes rather than str."""
    if isinstance(output, io.TextIOBase):
        return False
    if isinstance(output, (io.BufferedIOBase, io.RawIOBase)):
        return True
    mode = getattr(output, "mode", "")
    return isinstance(mode, str) and "b" in mode
