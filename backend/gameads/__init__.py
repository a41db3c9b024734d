"""Game Ads admin backend: super admin authentication and session management."""
