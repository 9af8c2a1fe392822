import json
import os
import re
import xml.etree.ElementTree as ET
from urllib.parse import urlparse

from tiptap_migration.models import Attachment, LegacyPage, LegacyPost

NS = {
    "content": "http://purl.org/rss/1.0/modules/content/",
    "excerpt": "http://wordpress.org/export/1.2/excerpt/",
    "wp": "http://wordpress.org/export/1.2/",
    "dc": "http://purl.org/dc/elements/1.1/",
}

# Legacy category slug -> category slug on the new site
CATEGORY_MAP = {
    "novosti": "opcinske-vijesti",
    "obavijesti_juo": "obavijesti",
    "dogadanja": "dogadanja",
    "istaknuti": "opcinske-vijesti",
}
FEATURED_CATEGORY = "istaknuti"

POSTS_PATH_PREFIX = "/vijesti"


def _text(item, path):
    element = item.find(path, NS)
    if element is None or element.text is None:
        return ""
    return element.text.strip()


def _int(value, default=0):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _meta(item, key):
    for meta in item.findall("wp:postmeta", NS):
        if _text(meta, "wp:meta_key") == key:
            return _text(meta, "wp:meta_value") or None
    return None


def _terms(item, domain):
    return [
        cat.get("nicename")
        for cat in item.findall("category")
        if cat.get("domain") == domain and cat.get("nicename")
    ]


def _slug_for(item, permalink):
    slug = _text(item, "wp:post_name")
    if slug:
        return slug
    # Fall back to the last path segment of the permalink
    path = urlparse(permalink).path if permalink else ""
    return path.strip("/").split("/")[-1] if path.strip("/") else ""


def generate_excerpt(content, max_length=200):
    """Plain-text excerpt cut at a word boundary.

    Args:
        content (str): HTML content.
        max_length (int): Maximum length before the ``...`` suffix.

    Returns:
        str: The excerpt.
    """
    text = re.sub(r"\s+", " ", re.sub(r"<[^>]+>", " ", content or "")).strip()
    if len(text) <= max_length:
        return text
    return re.sub(r"\s+\S*$", "", text[:max_length]) + "..."


def _parse_post(item):
    permalink = _text(item, "link")
    title = _text(item, "title")
    slug = _slug_for(item, permalink)
    if not title or not slug:
        return None
    content = _text(item, "content:encoded")
    legacy_categories = _terms(item, "category")
    categories = []
    for cat in legacy_categories:
        mapped = CATEGORY_MAP.get(cat, cat)
        if mapped not in categories:
            categories.append(mapped)
    thumbnail_id = _meta(item, "_thumbnail_id")
    return LegacyPost(
        id=_int(_text(item, "wp:post_id")),
        title=title,
        slug=slug,
        content=content,
        excerpt=_text(item, "excerpt:encoded") or generate_excerpt(content),
        date=_text(item, "wp:post_date"),
        modified=_text(item, "wp:post_modified"),
        status=_text(item, "wp:status"),
        author=_text(item, "dc:creator"),
        categories=categories,
        tags=_terms(item, "post_tag"),
        featured_image_id=_int(thumbnail_id, None) if thumbnail_id else None,
        is_featured=FEATURED_CATEGORY in legacy_categories,
        old_url=permalink,
    )


def _parse_page(item):
    permalink = _text(item, "link")
    title = _text(item, "title")
    slug = _slug_for(item, permalink)
    if not title or not slug:
        return None
    return LegacyPage(
        id=_int(_text(item, "wp:post_id")),
        title=title,
        slug=slug,
        content=_text(item, "content:encoded"),
        date=_text(item, "wp:post_date"),
        modified=_text(item, "wp:post_modified"),
        status=_text(item, "wp:status"),
        parent_id=_int(_text(item, "wp:post_parent")),
        menu_order=_int(_text(item, "wp:menu_order")),
        old_url=permalink,
    )


def _parse_attachment(item):
    url = _text(item, "wp:attachment_url")
    if not url:
        return None
    return Attachment(
        id=_int(_text(item, "wp:post_id")),
        title=_text(item, "title"),
        url=url,
        filename=url.rstrip("/").split("/")[-1],
        mime_type=_text(item, "wp:post_mime_type") or "application/octet-stream",
        date=_text(item, "wp:post_date"),
    )


def extract_from_wxr(file_path):
    """Extract posts, pages and attachments from a WordPress WXR export.

    Only published posts/pages and ``inherit`` attachments are kept.  A map
    from each legacy permalink to its path on the new site is built along
    the way (posts live under ``/vijesti/<slug>``, pages at ``/<slug>``).

    Args:
        file_path (str): Path to the XML export.

    Returns:
        dict: ``posts``, ``pages``, ``attachments`` (model lists) and
        ``url_map`` (dict).

    Raises:
        FileNotFoundError: If the export file does not exist.
        ET.ParseError: If the XML cannot be parsed.
        ValueError: If an item cannot be converted, with the item id.
    """
    tree = ET.parse(file_path)
    root = tree.getroot()
    result = {"posts": [], "pages": [], "attachments": [], "url_map": {}}

    for item in root.findall(".//item"):
        post_type = _text(item, "wp:post_type")
        status = _text(item, "wp:status")
        if status not in ("publish", "inherit"):
            continue
        try:
            if post_type == "post" and status == "publish":
                post = _parse_post(item)
                if post:
                    result["posts"].append(post)
                    if post.old_url:
                        result["url_map"][post.old_url] = f"{POSTS_PATH_PREFIX}/{post.slug}"
            elif post_type == "page" and status == "publish":
                page = _parse_page(item)
                if page:
                    result["pages"].append(page)
                    if page.old_url:
                        result["url_map"][page.old_url] = f"/{page.slug}"
            elif post_type == "attachment":
                attachment = _parse_attachment(item)
                if attachment:
                    result["attachments"].append(attachment)
        except Exception as e:
            item_id = _text(item, "wp:post_id") or "unknown"
            raise ValueError(f"Error processing item with ID {item_id} in {file_path}: {e}") from e
    return result


def write_extraction(result, output_dir):
    """Write ``posts.json``, ``pages.json``, ``attachments.json`` and
    ``url-map.json`` to ``output_dir``.  Returns the written paths."""
    os.makedirs(output_dir, exist_ok=True)
    written = []
    for name in ("posts", "pages", "attachments"):
        path = os.path.join(output_dir, f"{name}.json")
        records = [m.model_dump(by_alias=True) for m in result[name]]
        with open(path, "w", encoding="utf-8") as f:
            json.dump(records, f, ensure_ascii=False, indent=2)
        written.append(path)
    path = os.path.join(output_dir, "url-map.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(result["url_map"], f, ensure_ascii=False, indent=2)
    written.append(path)
    return written


def load_items(file_path, model):
    """Load a ``posts.json``/``pages.json`` list into ``model`` instances.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If an entry fails validation, with its position.
    """
    with open(file_path, mode="r", encoding="utf-8") as f:
        data = json.load(f)
    items = []
    for index, raw in enumerate(data):
        try:
            items.append(model.model_validate(raw))
        except Exception as e:
            raise ValueError(f"Error processing entry {index} in {file_path}: {e}") from e
    return items
