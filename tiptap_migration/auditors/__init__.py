"""
Post-conversion audits: image URL checks and legacy HTML tag inventory.
"""

from .image_checker import RateLimiter, check_image_url, check_images, with_retries, write_report
from .tag_inventory import HANDLED_TAGS, count_tags, items_with_tag, unhandled_tags, write_counts

__all__ = [
    "HANDLED_TAGS",
    "RateLimiter",
    "check_image_url",
    "check_images",
    "count_tags",
    "items_with_tag",
    "unhandled_tags",
    "with_retries",
    "write_counts",
    "write_report",
]
