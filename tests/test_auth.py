"""
Token verification and the authorizer Lambda.
"""

from unittest.mock import MagicMock, patch

import pytest

import authorizer
from conftest import JWT_SECRET, USER_ID, make_event, make_token
from services.supabase_auth import SupabaseAuth, supabase_auth
from utils.decorators import resolve_session


class TestTokenValidation:
    def test_valid_token(self):
        user = supabase_auth.validate_jwt_token(make_token())

        assert user["user_id"] == USER_ID
        assert user["session_id"] == "session-1"
        assert user["email"] == f"{USER_ID}@example.com"

    def test_wrong_audience(self):
        assert supabase_auth.validate_jwt_token(make_token(aud="anon")) is None

    def test_garbage_token(self):
        assert supabase_auth.validate_jwt_token("not-a-jwt") is None

    def test_previous_secret_still_validates(self, monkeypatch):
        """Tokens signed before a rotation validate against AWSPREVIOUS"""
        old_secret = "previous-secret-value-that-is-long-enough-for-hs256"
        monkeypatch.setenv("JWT_SECRET_NAME", "habit-tracker/jwt")

        with patch(
            "services.supabase_auth.get_all_secret_versions",
            return_value=[JWT_SECRET, old_secret],
        ) as versions:
            auth = SupabaseAuth()
            user = auth.validate_jwt_token(make_token(secret=old_secret))

        assert user["user_id"] == USER_ID
        versions.assert_called_once_with("habit-tracker/jwt")

    @pytest.mark.parametrize(
        "header,expected",
        [
            ("Bearer abc", "abc"),
            ("bearer abc", "abc"),
            ("Token abc", None),
            ("Bearer", None),
            ("", None),
        ],
    )
    def test_extract_token_from_header(self, header, expected):
        assert supabase_auth.extract_token_from_header(header) == expected


class TestApiVerification:
    """Without a JWT secret the Supabase user endpoint decides"""

    @pytest.fixture(autouse=True)
    def no_secret(self, monkeypatch):
        monkeypatch.delenv("SUPABASE_JWT_SECRET")

    def test_user_endpoint_accepts(self):
        response = MagicMock(status_code=200)
        response.json.return_value = {"id": USER_ID, "email": "a@example.com"}

        with patch("services.supabase_auth.requests.get", return_value=response) as get:
            user = SupabaseAuth().validate_jwt_token(make_token())

        assert user["user_id"] == USER_ID
        assert user["session_id"] == "session-1"
        assert get.call_args.args[0] == "https://project.supabase.co/auth/v1/user"

    def test_user_endpoint_body_that_is_not_json(self):
        response = MagicMock(status_code=200)
        response.json.side_effect = ValueError("Expecting value")

        with patch("services.supabase_auth.requests.get", return_value=response):
            assert SupabaseAuth().validate_jwt_token(make_token()) is None

    def test_unreadable_user_endpoint_body_is_401(self, call_api, fake_db):
        response = MagicMock(status_code=200)
        response.json.side_effect = ValueError("Expecting value")

        with patch("services.supabase_auth.requests.get", return_value=response):
            status, _ = call_api("GET", "/api/habits", token=make_token())

        assert status == 401
        assert fake_db.calls == []

    def test_user_endpoint_rejects(self):
        with patch(
            "services.supabase_auth.requests.get",
            return_value=MagicMock(status_code=401),
        ):
            assert SupabaseAuth().validate_jwt_token(make_token()) is None


class TestResolveSession:
    def test_authorizer_context_is_trusted(self):
        event = make_event("GET", "/api/habits")
        event["requestContext"]["authorizer"] = {
            "lambda": {"user_id": "from-authorizer", "session_id": "s", "email": "e"}
        }

        assert resolve_session(event) == {
            "user_id": "from-authorizer",
            "session_id": "s",
            "email": "e",
        }

    def test_bearer_token(self):
        event = make_event("GET", "/api/habits", token=make_token())

        assert resolve_session(event)["user_id"] == USER_ID

    def test_no_credentials(self):
        assert resolve_session(make_event("GET", "/api/habits")) is None


class TestAuthorizer:
    def test_authorizes_valid_token(self, lambda_context):
        event = make_event("GET", "/api/habits", token=make_token())

        result = authorizer.lambda_handler(event, lambda_context)

        assert result == {
            "isAuthorized": True,
            "context": {
                "user_id": USER_ID,
                "session_id": "session-1",
                "email": f"{USER_ID}@example.com",
            },
        }

    def test_denies_missing_token(self, lambda_context):
        event = make_event("GET", "/api/habits")

        result = authorizer.lambda_handler(event, lambda_context)

        assert result == {"isAuthorized": False}

    def test_denies_on_unexpected_error(self, lambda_context):
        with patch.object(
            authorizer.supabase_auth,
            "get_user_from_request",
            side_effect=RuntimeError("boom"),
        ):
            result = authorizer.lambda_handler(
                make_event("GET", "/api/habits", token="x"), lambda_context
            )

        assert result == {"isAuthorized": False}
