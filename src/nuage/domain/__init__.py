from .models import Comment, Playlist, Post, PostItem, Track, User
from .slice import Cursor, Slice

__all__ = [
    "Comment",
    "Cursor",
    "Playlist",
    "Post",
    "PostItem",
    "Slice",
    "Track",
    "User",
]
