#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blogmd/parsers/base.py
"""Base classes for document tree parsers.

This module defines the abstract base class that parsers inherit from. The
BaseParser provides a consistent interface for reconstructing editor
document trees from interchange text.

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Union

from blogmd.ast.nodes import Node
from blogmd.exceptions import InvalidOptionsError, ValidationError
from blogmd.options.base import BaseParserOptions
from blogmd.utils.encoding import normalize_stream_to_text, read_text_with_encoding_detection

logger = logging.getLogger(__name__)

ParserInput = Union[str, bytes, Path, IO[bytes], IO[str]]


class BaseParser(ABC):
    """Abstract base class for document tree parsers.

    Parameters
    ----------
    options : BaseParserOptions or None, default = None
        Format-specific parsing options

    """

    def __init__(self, options: BaseParserOptions | None = None):
        """Initialize the parser with optional configuration."""
        self.options = options

    @staticmethod
    def _validate_options_type(options: BaseParserOptions | None, expected_type: type, parser_name: str) -> None:
        """Validate that options are of the correct type for this parser.

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                converter_name=f"{parser_name} parser",
                expected_type=expected_type,
                received_type=type(options),
            )

    @abstractmethod
    async def parse(self, input_data: ParserInput) -> Node:
        """Parse the input into a ``doc`` tree.

        Parameters
        ----------
        input_data : str, bytes, Path, or file-like
            Interchange text. A ``str`` is always treated as content, never
            as a path; pass a ``Path`` to read a file.

        Returns
        -------
        Node
            ``doc`` root

        Raises
        ------
        ParsingError
            If the markup cannot be mapped to a tree
        DependencyError
            If the rendering libraries are not installed
        ValidationError
            If the input cannot be read

        """
        raise NotImplementedError

    @staticmethod
    def _load_text_content(input_data: ParserInput) -> str:
        """Return the input as text, decoding bytes and reading files and streams."""
        if isinstance(input_data, str):
            return input_data
        if isinstance(input_data, bytes):
            return read_text_with_encoding_detection(input_data)
        if isinstance(input_data, Path):
            try:
                return read_text_with_encoding_detection(input_data.read_bytes())
            except OSError as e:
                raise ValidationError(
                    f"Cannot read input file: {e}",
                    parameter_name="input_data",
                    parameter_value=input_data,
                    original_error=e,
                ) from e
        if hasattr(input_data, "read"):
            return normalize_stream_to_text(input_data)
        raise ValidationError(
            f"Unsupported input type: {type(input_data).__name__}",
            parameter_name="input_data",
            parameter_value=input_data,
        )
