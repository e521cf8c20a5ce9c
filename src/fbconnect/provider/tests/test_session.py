"""Tests for provider session parsing and verification."""

import hashlib
import json
from unittest.mock import Mock, patch

import pytest

from src.fbconnect.provider.exceptions import InvalidSessionError
from src.fbconnect.provider.session import (
    generate_signature,
    parse_session_cookie,
    read_session,
    validate_session,
)

API_SECRET = "test-secret"


def _request(query: dict[str, str] | None = None, cookies: dict[str, str] | None = None) -> Mock:
    request = Mock()
    request.query_params = query or {}
    request.cookies = cookies or {}
    request.url.path = "/"
    return request


class TestGenerateSignature:
    """Tests for generate_signature."""

    def test_signs_sorted_pairs_with_secret(self):
        expected = hashlib.md5(b"a=1b=2secret").hexdigest()

        assert generate_signature({"b": "2", "a": "1"}, "secret") == expected

    def test_ignores_sig_and_sorts_keys(self):
        unsigned = {"uid": "1", "access_token": "t"}
        signed = {"access_token": "t", "sig": "whatever", "uid": "1"}

        assert generate_signature(unsigned, "s") == generate_signature(signed, "s")

    def test_depends_on_secret(self):
        params = {"uid": "1"}

        assert generate_signature(params, "one") != generate_signature(params, "two")


class TestValidateSession:
    """Tests for validate_session."""

    def test_valid_session(self, session_params):
        session = validate_session(session_params, API_SECRET)

        assert session.uid == "123"
        assert session.access_token == "test-access-token"
        assert session.expires == 0

    def test_missing_key_rejected(self, session_params):
        del session_params["session_key"]

        with pytest.raises(InvalidSessionError, match="session_key"):
            validate_session(session_params, API_SECRET)

    def test_tampered_session_rejected(self, session_params):
        session_params["uid"] = "999"

        with pytest.raises(InvalidSessionError, match="signature"):
            validate_session(session_params, API_SECRET)

    def test_wrong_secret_rejected(self, session_params):
        with pytest.raises(InvalidSessionError):
            validate_session(session_params, "other-secret")


class TestReadSession:
    """Tests for read_session."""

    def test_reads_cookie(self, provider_config, session_cookie):
        request = _request(cookies={provider_config.cookie_name: session_cookie})

        session = read_session(request, provider_config)

        assert session is not None
        assert session.uid == "123"

    def test_reads_quoted_cookie(self, provider_config, session_cookie):
        request = _request(cookies={provider_config.cookie_name: f'"{session_cookie}"'})

        assert read_session(request, provider_config).uid == "123"

    def test_query_param_wins_over_cookie(self, provider_config, session_params):
        request = _request(
            query={"session": json.dumps(session_params)},
            cookies={provider_config.cookie_name: "garbage"},
        )

        assert read_session(request, provider_config).uid == "123"

    def test_no_session(self, provider_config):
        assert read_session(_request(), provider_config) is None

    def test_invalid_session_is_ignored(self, provider_config, session_params):
        session_params["sig"] = "0" * 32
        request = _request(query={"session": json.dumps(session_params)})

        assert read_session(request, provider_config) is None

    def test_malformed_json_is_ignored(self, provider_config):
        request = _request(query={"session": "{not json"})

        assert read_session(request, provider_config) is None

    def test_invalid_query_param_falls_back_to_cookie(self, provider_config, session_params, session_cookie):
        bad_params = dict(session_params, sig="0" * 32)
        request = _request(
            query={"session": json.dumps(bad_params)},
            cookies={provider_config.cookie_name: session_cookie},
        )

        with patch("src.fbconnect.provider.session.logger") as mock_logger:
            session = read_session(request, provider_config)

        assert session is not None
        assert session.uid == "123"
        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args.kwargs["extra"]["source"] == "query_param"

    def test_malformed_query_param_falls_back_to_cookie(self, provider_config, session_cookie):
        request = _request(
            query={"session": "{not json"},
            cookies={provider_config.cookie_name: session_cookie},
        )

        assert read_session(request, provider_config).uid == "123"


def test_parse_session_cookie_strips_quotes():
    assert parse_session_cookie('"uid=1&sig=abc"') == {"uid": "1", "sig": "abc"}
