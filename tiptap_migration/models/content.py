from __future__ import annotations

import json
import unicodedata
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _slugify(value: str) -> str:
    text = value.strip().lower().replace("đ", "d")
    text = "".join(
        c for c in unicodedata.normalize("NFD", text) if unicodedata.category(c) != "Mn"
    )
    out = []
    prev_dash = False
    for ch in text:
        if ch.isalnum():
            out.append(ch)
            prev_dash = False
        else:
            if not prev_dash:
                out.append("-")
            prev_dash = True
    slug = "".join(out).strip("-")
    return slug[:200]


class _LegacyItem(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    id: int
    title: str = ""
    slug: Optional[str] = Field(None, validate_default=True)
    content: str = ""
    date: Optional[str] = None
    modified: Optional[str] = None
    status: Optional[str] = None
    old_url: str = Field("", alias="oldUrl")

    @field_validator("content", mode="before")
    @classmethod
    def _none_content(cls, v: Any) -> Any:
        return v if v is not None else ""

    @field_validator("slug", mode="before")
    @classmethod
    def _ensure_slug(cls, v: Optional[str], info):  # type: ignore[override]
        if v is not None and str(v).strip():
            return v
        title = info.data.get("title")
        if isinstance(title, str) and title.strip():
            return _slugify(title)
        return v


class LegacyPost(_LegacyItem):
    excerpt: str = ""
    author: Optional[str] = None
    categories: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    featured_image_id: Optional[int] = Field(None, alias="featuredImageId")
    is_featured: bool = Field(False, alias="isFeatured")


class LegacyPage(_LegacyItem):
    parent_id: int = Field(0, alias="parentId")
    menu_order: int = Field(0, alias="menuOrder")


class Attachment(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: int
    title: str = ""
    url: str
    filename: str = ""
    mime_type: str = Field("", alias="mimeType")
    date: Optional[str] = None


class ImageRef(BaseModel):
    url: str
    caption: str = ""


class ConvertedItem(BaseModel):
    """Result of converting one legacy post or page."""

    model_config = ConfigDict(populate_by_name=True)

    kind: str
    slug: str
    title: str = ""
    content: dict[str, Any]
    images: list[ImageRef] = Field(default_factory=list)
    source_length: int = 0

    @property
    def content_json(self) -> str:
        return json.dumps(self.content, ensure_ascii=False)

    def to_record(self) -> dict[str, Any]:
        """Shape stored by the CMS: content as a JSON string, images or null."""
        images = [img.model_dump() for img in self.images]
        return {
            "slug": self.slug,
            "title": self.title,
            "content": self.content_json,
            "images": images or None,
        }
