"""
Supabase authentication service for validating session tokens
"""

import os
from typing import Any, Dict, List, Optional

import jwt
import requests
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from services.parameter_store import config
from services.secrets import get_all_secret_versions
from utils.logging import setup_logger

logger = setup_logger(__name__)


def _user_info_from_claims(claims: Dict[str, Any]) -> Dict[str, Any]:
    app_metadata = claims.get("app_metadata") or {}
    return {
        "user_id": claims.get("sub") or claims.get("id"),
        "session_id": claims.get("session_id"),
        "email": claims.get("email"),
        "email_verified": claims.get("email_confirmed_at") is not None
        or bool((claims.get("user_metadata") or {}).get("email_verified")),
        "provider": app_metadata.get("provider"),
        "role": claims.get("role"),
        "aud": claims.get("aud"),
        "exp": claims.get("exp"),
    }


class SupabaseAuth:
    """Verifies Supabase access tokens and extracts the session's user."""

    audience = "authenticated"

    def __init__(self):
        self._jwt_secrets: Optional[List[str]] = None

    @property
    def supabase_url(self) -> Optional[str]:
        url = config.get("supabase/url")
        return url.rstrip("/") if url else None

    @property
    def supabase_anon_key(self) -> Optional[str]:
        return config.get("supabase/anon-key")

    def jwt_secrets(self) -> List[str]:
        """
        Secrets to try when verifying a token signature.

        The configured secret comes first; when JWT_SECRET_NAME names a
        Secrets Manager secret its current and previous versions follow.
        """
        if self._jwt_secrets is not None:
            return self._jwt_secrets

        secrets = []
        configured = config.get("supabase/jwt-secret")
        if configured:
            secrets.append(configured)

        secret_name = os.getenv("JWT_SECRET_NAME")
        if secret_name:
            for value in get_all_secret_versions(secret_name):
                if value not in secrets:
                    secrets.append(value)

        if not secrets:
            logger.warning(
                "Supabase JWT secret not configured. Will use API-based verification."
            )

        self._jwt_secrets = secrets
        return secrets

    def reset(self) -> None:
        """Forget cached secrets (after rotation or in tests)."""
        self._jwt_secrets = None

    def validate_jwt_token(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Validate a Supabase access token and return user information

        Args:
            token: The JWT from the Authorization header

        Returns:
            Dictionary containing user information if valid, None otherwise
        """
        secrets = self.jwt_secrets()
        if secrets:
            return self._validate_jwt_manual(token, secrets)

        logger.info("Using API-based token verification (no JWT secret available)")
        return self._validate_jwt_via_api(token)

    def _validate_jwt_manual(
        self, token: str, secrets: List[str]
    ) -> Optional[Dict[str, Any]]:
        """Verify the HS256 signature against each known secret"""
        for secret in secrets:
            try:
                payload = jwt.decode(
                    token,
                    secret,
                    algorithms=["HS256"],
                    audience=self.audience,
                )
            except ExpiredSignatureError:
                logger.warning("JWT token has expired")
                return None
            except jwt.InvalidSignatureError:
                continue
            except InvalidTokenError as e:
                logger.warning(f"Invalid JWT token: {str(e)}")
                return None

            user_info = _user_info_from_claims(payload)
            if not user_info["user_id"]:
                logger.warning("JWT token has no subject")
                return None

            logger.debug(
                "Validated token", extra={"user_id": user_info["user_id"]}
            )
            return user_info

        logger.warning("JWT signature did not match any configured secret")
        return None

    def _validate_jwt_via_api(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Validate the token by asking Supabase Auth for the user it belongs to.
        Works without the JWT secret.
        """
        if not self.supabase_url or not self.supabase_anon_key:
            logger.error("Supabase URL or anon key not configured for API verification")
            return None

        headers = {
            "Authorization": f"Bearer {token}",
            "apikey": self.supabase_anon_key,
            "Content-Type": "application/json",
        }

        try:
            response = requests.get(
                f"{self.supabase_url}/auth/v1/user", headers=headers, timeout=10
            )
        except requests.RequestException as e:
            logger.error(f"Error validating JWT token via API: {str(e)}")
            return None

        if response.status_code != 200:
            logger.warning(f"Token validation failed via API: {response.status_code}")
            return None

        try:
            user = response.json()
        except ValueError:
            logger.error("Supabase user endpoint returned a body that is not JSON")
            return None

        if not isinstance(user, dict):
            logger.error("Supabase user endpoint returned an unexpected body")
            return None

        user_info = _user_info_from_claims(user)
        # The user endpoint does not echo session claims; read them unverified
        # from the token Supabase just accepted.
        try:
            claims = jwt.decode(token, options={"verify_signature": False})
            user_info["session_id"] = claims.get("session_id")
            user_info["exp"] = claims.get("exp")
        except InvalidTokenError:
            pass

        return user_info if user_info["user_id"] else None

    def extract_token_from_header(self, authorization_header: str) -> Optional[str]:
        """
        Extract the JWT token from the Authorization header

        Args:
            authorization_header: The Authorization header value

        Returns:
            The JWT token if valid format, None otherwise
        """
        if not authorization_header:
            return None

        parts = authorization_header.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            return None

        return parts[1]

    def get_user_from_request(self, event: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Extract and validate the session user from an API Gateway event

        Args:
            event: API Gateway event containing headers

        Returns:
            User information if authentication successful, None otherwise
        """
        headers = event.get("headers") or {}
        authorization = headers.get("Authorization") or headers.get("authorization")

        if not authorization:
            logger.debug("No Authorization header found")
            return None

        token = self.extract_token_from_header(authorization)
        if not token:
            logger.debug("Invalid Authorization header format")
            return None

        return self.validate_jwt_token(token)


# Global instance
supabase_auth = SupabaseAuth()
