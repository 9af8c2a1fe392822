from .content import Attachment, ConvertedItem, ImageRef, LegacyPage, LegacyPost

__all__ = ["Attachment", "ConvertedItem", "ImageRef", "LegacyPage", "LegacyPost"]
