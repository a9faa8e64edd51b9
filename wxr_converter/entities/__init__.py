"""
Entities built from a WXR export.

``Item`` is the base of ``Channel`` and ``Post``; ``Attachment`` extends
``Post``.  ``Author`` stands alone and is referenced by posts through its
username only.
"""

from .base import BagValue, Entity
from .item import Item
from .channel import Channel
from .post import Post
from .attachment import Attachment
from .author import Author

ENTITY_TYPES = (Channel, Post, Attachment, Author)

__all__ = [
    "Attachment",
    "Author",
    "BagValue",
    "Channel",
    "ENTITY_TYPES",
    "Entity",
    "Item",
    "Post",
]
