from .post import Post, PostStats, STAT_FIELDS
from .profile import Profile, NotificationSettings
from .category import Category, PostCategory

__all__ = [
    "Post",
    "PostStats",
    "STAT_FIELDS",
    "Profile",
    "NotificationSettings",
    "Category",
    "PostCategory",
]
