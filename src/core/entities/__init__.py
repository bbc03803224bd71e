"""
Business entities representing core domain concepts.

Exports:
- VideoRecord: A submitted video with its categories, tags and vote state
- VideoStatus: Publication status (pending, approved)
- TagRef: Tag attached to a video
- Category: Reference category with localized titles
- Tag: Reference tag
- Vote: A user's vote on a pending video
"""

from src.core.entities.video import TagRef, VideoRecord, VideoStatus
from src.core.entities.catalog import Category, Tag
from src.core.entities.vote import Vote

__all__ = [
    "VideoRecord",
    "VideoStatus",
    "TagRef",
    "Category",
    "Tag",
    "Vote",
]
