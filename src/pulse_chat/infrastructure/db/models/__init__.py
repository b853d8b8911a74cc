"""Import every model so Base.metadata knows all tables before create_all."""
from pulse_chat.infrastructure.db.models.message import MessageModel
from pulse_chat.infrastructure.db.models.user import UserModel

__all__ = [
    "MessageModel",
    "UserModel",
]
