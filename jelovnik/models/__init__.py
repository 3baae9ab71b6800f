from jelovnik.models.user import User, UserRole
from jelovnik.models.menu_item import MenuItem
from jelovnik.models.location import Location

__all__ = [
    "User",
    "UserRole",
    "MenuItem",
    "Location",
]
