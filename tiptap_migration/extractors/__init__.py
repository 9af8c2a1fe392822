"""
Extractors for WordPress export files.

This subpackage parses the WXR (XML) export of the legacy site into post,
page and attachment records and loads the JSON files written from them.
The records are what the migration tool feeds to the HTML converter.
"""

from .wordpress_extractor import extract_from_wxr, generate_excerpt, load_items, write_extraction

__all__ = ["extract_from_wxr", "generate_excerpt", "load_items", "write_extraction"]
