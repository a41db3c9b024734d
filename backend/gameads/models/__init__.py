# Game Ads Models
from gameads.models.admin_account import AdminAccount
from gameads.models.base import BaseModel

__all__ = [
    "AdminAccount",
    "BaseModel",
]
