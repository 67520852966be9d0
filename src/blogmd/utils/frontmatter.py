#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blogmd/utils/frontmatter.py
"""Front matter extraction and formatting for imported/exported posts.

Blog posts written outside the editor often carry a YAML (``---``) or TOML
(``+++``) header with title, tags and dates. The importer can strip it and
keep the values on the ``doc`` node; the exporter can write them back.

"""

from __future__ import annotations

import logging
import sys
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]

import yaml

logger = logging.getLogger(__name__)

_DELIMITERS = {"---": "yaml", "+++": "toml"}


def split_frontmatter(content: str) -> tuple[str, dict[str, Any]]:
    """Split a leading front matter block from markdown content.

    Parameters
    ----------
    content : str
        Markdown content that may start with front matter

    Returns
    -------
    tuple[str, dict]
        Remaining markdown and the parsed front matter mapping. When there is
        no well-formed header the content is returned unchanged with an
        empty mapping.

    """
    lines = content.splitlines(keepends=True)
    if not lines:
        return content, {}

    delimiter = lines[0].strip()
    fmt = _DELIMITERS.get(delimiter)
    if fmt is None:
        return content, {}

    end_index = next((i for i in range(1, len(lines)) if lines[i].strip() == delimiter), -1)
    if end_index <= 0:
        return content, {}

    header = "".join(lines[1:end_index])
    remaining = "".join(lines[end_index + 1 :])

    try:
        data = yaml.safe_load(header) if fmt == "yaml" else tomllib.loads(header)
    except (yaml.YAMLError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring malformed %s front matter: %s", fmt, e)
        return content, {}

    if not isinstance(data, dict):
        logger.debug("Front matter is not a mapping, leaving content untouched")
        return content, {}

    return remaining, data


def format_yaml_frontmatter(data: dict[str, Any]) -> str:
    """Format a mapping as a YAML front matter block (including delimiters)."""
    if not data:
        return ""
    body = yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=False)
    return f"---\n{body}---"
