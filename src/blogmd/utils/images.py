#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blogmd/utils/images.py
"""Image URL rewriting helpers for markdown export.

Posts reference uploaded images through the storage route (for example
``/images/<key>?quality=80``). When a post is exported alongside its image
files, those URLs are rewritten to point at the exported copies.

"""

from __future__ import annotations

from typing import Callable

from blogmd.constants import DEFAULT_EXPORT_IMAGES_PREFIX, DEFAULT_EXPORT_IMAGES_TARGET


def strip_query_and_fragment(url: str) -> str:
    """Remove any ``?query`` and ``#fragment`` suffix from a URL."""
    for separator in ("?", "#"):
        url = url.split(separator, 1)[0]
    return url


def make_export_image_rewriter(
    prefix: str = DEFAULT_EXPORT_IMAGES_PREFIX,
    target: str = DEFAULT_EXPORT_IMAGES_TARGET,
) -> Callable[[str], str]:
    """Build the rewriter that relativizes storage image URLs for export.

    Parameters
    ----------
    prefix : str, default "/images/"
        Path prefix identifying images served from the blog's own storage
    target : str, default "./images/"
        Replacement prefix pointing at the exported image directory

    Returns
    -------
    Callable[[str], str]
        Function mapping an image URL to its exported form; URLs outside
        ``prefix`` (external images) are returned unchanged

    Examples
    --------
        >>> rewrite = make_export_image_rewriter()
        >>> rewrite("/images/abc-123.jpg?quality=80")
        './images/abc-123.jpg'
        >>> rewrite("https://example.com/photo.jpg")
        'https://example.com/photo.jpg'

    """

    def rewrite(src: str) -> str:
        if not src.startswith(prefix):
            return src
        key = strip_query_and_fragment(src[len(prefix) :])
        return f"{target}{key}"

    return rewrite
