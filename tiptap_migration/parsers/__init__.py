"""
Parsers and converters used by the migration pipeline.

The entry point is :func:`convert_html_to_tiptap` (or
:func:`convert_content`, which also returns the image manifest).  Posts are
converted with :data:`POST_BLOCKS`, pages with :data:`PAGE_BLOCKS`.
"""

from .assets import extract_images
from .entities import decode_entities
from .inline import parse_inline
from .segmenter import PAGE_BLOCKS, POST_BLOCKS, normalize_html, segment
from .tiptap_local import convert_content, convert_html_to_tiptap
from .urls import UrlRewriteTable, load_url_table, rewrite_urls

__all__ = [
    "PAGE_BLOCKS",
    "POST_BLOCKS",
    "UrlRewriteTable",
    "convert_content",
    "convert_html_to_tiptap",
    "decode_entities",
    "extract_images",
    "load_url_table",
    "normalize_html",
    "parse_inline",
    "rewrite_urls",
    "segment",
]
