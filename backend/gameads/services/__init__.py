# Game Ads Services
from gameads.services.credential_store import CredentialStore
from gameads.services.session_manager import AdminIdentity, SessionManager

__all__ = [
    "AdminIdentity",
    "CredentialStore",
    "SessionManager",
]
