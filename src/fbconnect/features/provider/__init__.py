"""Provider presentation endpoints: SDK bootstrap, current member, login/logout."""

from src.fbconnect.features.provider.handlers import router

__all__ = ["router"]
