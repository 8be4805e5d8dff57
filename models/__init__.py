from models.application import Application
from models.comment import ApplicationComment
from models.profile import Profile

__all__ = [
    "Application",
    "ApplicationComment",
    "Profile",
]
