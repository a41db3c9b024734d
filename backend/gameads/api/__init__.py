# Game Ads API
from gameads.api.router import api_router

__all__ = ["api_router"]
