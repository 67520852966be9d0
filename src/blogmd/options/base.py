"""Base classes for parser and renderer options.

This module defines the foundation classes for the option objects used by
both conversion directions.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class BaseRendererOptions(CloneFrozenMixin):
    """Base class for renderer options.

    Parameters
    ----------
    render_frontmatter : bool, default=False
        Emit ``doc.attrs["frontmatter"]`` as a YAML front matter block.

    Notes
    -----
    Subclasses define format-specific rendering options as frozen dataclass fields.

    """

    render_frontmatter: bool = field(
        default=False,
        metadata={"help": "Emit document front matter (doc.attrs['frontmatter']) as YAML", "importance": "advanced"},
    )


@dataclass(frozen=True)
class BaseParserOptions(CloneFrozenMixin):
    """Base class for parser options.

    Parameters
    ----------
    parse_frontmatter : bool, default=False
        Strip a leading YAML (``---``) or TOML (``+++``) header and keep it in
        ``doc.attrs["frontmatter"]``.

    """

    parse_frontmatter: bool = field(
        default=False,
        metadata={"help": "Extract YAML/TOML front matter into doc.attrs['frontmatter']", "importance": "core"},
    )
