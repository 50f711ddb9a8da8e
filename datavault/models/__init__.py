from . import user, data_item
from .user import User
from .data_item import AccessGrant, AccessLevel, Category, DataItem

__all__ = [
    "user",
    "data_item",
    "User",
    "DataItem",
    "AccessGrant",
    "AccessLevel",
    "Category",
]
