"""Provider session extraction and signature verification."""

import hashlib
import hmac
import json
import logging
from urllib.parse import parse_qsl

from fastapi import Request
from pydantic import ValidationError

from src.fbconnect.config import ProviderConfig
from src.fbconnect.provider.exceptions import InvalidSessionError
from src.fbconnect.provider.models import ProviderSession

logger = logging.getLogger(__name__)

REQUIRED_SESSION_KEYS = ("uid", "session_key", "secret", "access_token", "sig")


def generate_signature(params: dict[str, str], api_secret: str) -> str:
    """
    Sign session parameters the way the provider does.

    The payload is every `key=value` pair except `sig`, sorted by key and
    concatenated without separators, followed by the app secret.

    Args:
        params: Session parameters
        api_secret: Application secret

    Returns:
        Hex MD5 digest
    """
    payload = "".join(f"{key}={params[key]}" for key in sorted(params) if key != "sig")
    return hashlib.md5((payload + api_secret).encode("utf-8")).hexdigest()


def validate_session(params: dict[str, str], api_secret: str) -> ProviderSession:
    """
    Check the session carries every required key and a matching signature.

    Raises:
        InvalidSessionError: If a key is missing or the signature does not match
    """
    missing = [key for key in REQUIRED_SESSION_KEYS if not params.get(key)]
    if missing:
        raise InvalidSessionError(f"Session missing required keys: {', '.join(missing)}")

    expected = generate_signature(params, api_secret)
    if not hmac.compare_digest(expected.encode("utf-8"), str(params["sig"]).encode("utf-8")):
        raise InvalidSessionError("Session signature mismatch")

    try:
        return ProviderSession.model_validate(params)
    except ValidationError as e:
        raise InvalidSessionError(f"Malformed session: {e}") from e


def parse_session_cookie(value: str) -> dict[str, str]:
    """Decode the quoted query-string the JS SDK stores in its cookie."""
    return dict(parse_qsl(value.strip('"'), keep_blank_values=True))


def parse_session_param(value: str) -> dict[str, str]:
    """Decode the JSON session the provider appends to its login redirect."""
    try:
        params = json.loads(value)
    except json.JSONDecodeError as e:
        raise InvalidSessionError(f"Session parameter is not valid JSON: {e}") from e

    if not isinstance(params, dict):
        raise InvalidSessionError("Session parameter must be a JSON object")

    return {key: str(val) for key, val in params.items() if val is not None}


def read_session(request: Request, config: ProviderConfig) -> ProviderSession | None:
    """
    Return the verified provider session carried by the request, if any.

    The `session` query parameter (set on the login redirect) wins over the
    `fbs_<app_id>` cookie. An invalid parameter is logged and the cookie is
    tried next; when neither is valid the request continues anonymously.

    Args:
        request: Incoming request
        config: Provider credentials

    Returns:
        ProviderSession or None
    """
    raw_param = request.query_params.get("session")
    if raw_param:
        try:
            return validate_session(parse_session_param(raw_param), config.api_secret)
        except InvalidSessionError as e:
            _log_invalid_session(request, "query_param", e)

    raw_cookie = request.cookies.get(config.cookie_name)
    if raw_cookie:
        try:
            return validate_session(parse_session_cookie(raw_cookie), config.api_secret)
        except InvalidSessionError as e:
            _log_invalid_session(request, "cookie", e)

    return None


def _log_invalid_session(request: Request, source: str, error: InvalidSessionError) -> None:
    logger.warning(
        f"Ignoring invalid provider session from {source}: {error}",
        extra={"error_type": "invalid_provider_session", "source": source, "path": request.url.path},
    )
