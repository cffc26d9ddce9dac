from .base import BaseViewModel
from .feed_list_viewmodel import FeedListViewModel
from .sidebar_viewmodel import SidebarViewModel

__all__ = [
    "BaseViewModel",
    "FeedListViewModel",
    "SidebarViewModel",
]
