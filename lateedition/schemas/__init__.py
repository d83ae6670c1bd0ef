"""Document schemas for blob-stored content."""

from lateedition.schemas.albums import Album, AlbumMeta
from lateedition.schemas.base import Document, Photo
from lateedition.schemas.events import Event, EventMeta
from lateedition.schemas.lookbook import LookbookData, LookbookImage
from lateedition.schemas.music import Mix, MusicData, StaffPick
from lateedition.schemas.posts import Post, PostMeta
from lateedition.schemas.staff import StaffMember, StaffMemberMeta

__all__ = [
    "Album",
    "AlbumMeta",
    "Document",
    "Event",
    "EventMeta",
    "LookbookData",
    "LookbookImage",
    "Mix",
    "MusicData",
    "Photo",
    "Post",
    "PostMeta",
    "StaffMember",
    "StaffMemberMeta",
    "StaffPick",
]
