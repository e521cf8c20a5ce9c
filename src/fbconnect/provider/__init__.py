"""Identity provider boundary: sessions, Graph API and provider URLs."""

from src.fbconnect.provider.exceptions import GraphAPIError, InvalidSessionError, ProviderError
from src.fbconnect.provider.graph_client import GraphClient
from src.fbconnect.provider.models import ProfileResult, ProviderCallFailure, ProviderSession
from src.fbconnect.provider.session import generate_signature, read_session, validate_session

__all__ = [
    "GraphClient",
    "ProfileResult",
    "ProviderCallFailure",
    "ProviderSession",
    "ProviderError",
    "InvalidSessionError",
    "GraphAPIError",
    "generate_signature",
    "read_session",
    "validate_session",
]
