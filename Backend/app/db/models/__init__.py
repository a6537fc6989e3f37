from .user import User
from .sleep import SleepRecord
from .follow import Follow


__all__ = [
    "User",
    "SleepRecord",
    "Follow",
]
