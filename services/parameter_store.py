"""
AWS Systems Manager Parameter Store service.

This module provides parameter retrieval from AWS Parameter Store with local
development support using .env files and python-dotenv.
"""

import os
from functools import lru_cache
from typing import Any, Dict

import boto3
from botocore.exceptions import ClientError
from dotenv import load_dotenv

from services.exceptions import ConfigurationError
from utils.logging import setup_logger

logger = setup_logger(__name__)

# Load .env file for local development
load_dotenv()

_ssm_client = None


def get_ssm_client():
    """Get or create SSM client with caching."""
    global _ssm_client
    if _ssm_client is None:
        _ssm_client = boto3.client("ssm")
    return _ssm_client


def parameter_store_enabled() -> bool:
    """Parameter Store is consulted inside Lambda or when explicitly enabled."""
    flag = os.getenv("PARAMETER_STORE_ENABLED", "").lower()
    if flag in ("1", "true", "yes"):
        return True
    if flag in ("0", "false", "no"):
        return False
    return bool(os.getenv("AWS_LAMBDA_FUNCTION_NAME"))


def env_var_for_key(key: str) -> str:
    """Environment variable for a config key: supabase/anon-key -> SUPABASE_ANON_KEY."""
    return key.replace("/", "_").replace("-", "_").upper()


@lru_cache(maxsize=128)
def get_parameter(parameter_name: str, decrypt: bool = True) -> str | None:
    """
    Get a parameter from AWS Parameter Store with caching.

    Args:
        parameter_name: The full name of the parameter to retrieve
        decrypt: Whether to decrypt SecureString parameters

    Returns:
        Parameter value or None if not found
    """
    try:
        ssm = get_ssm_client()
        response = ssm.get_parameter(Name=parameter_name, WithDecryption=decrypt)
        value = response["Parameter"]["Value"]

        logger.debug(f"Retrieved parameter {parameter_name} from Parameter Store")
        return value

    except ClientError as e:
        error_code = e.response["Error"]["Code"]

        if error_code == "ParameterNotFound":
            logger.warning(f"Parameter {parameter_name} not found in Parameter Store")
        else:
            logger.error(f"Error retrieving parameter {parameter_name}: {e}")

        return None


class ParameterStoreConfig:
    """
    Configuration backed by environment variables and Parameter Store.

    Environment variables win so local runs and tests never reach AWS.
    """

    def __init__(self, parameter_prefix: str = "/habit-tracker"):
        """
        Initialize configuration with parameter prefix.

        Args:
            parameter_prefix: Prefix for parameter names in Parameter Store
        """
        self.parameter_prefix = parameter_prefix.rstrip("/")
        self._config_cache: Dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            key: Configuration key, e.g. "supabase/url"
            default: Default value if not found

        Returns:
            Configuration value or default
        """
        if key in self._config_cache:
            return self._config_cache[key]

        value = os.getenv(env_var_for_key(key)) or None

        if value is None and parameter_store_enabled():
            value = get_parameter(f"{self.parameter_prefix}/{key}")

        if value is None:
            return default

        self._config_cache[key] = value
        return value

    def get_required(self, key: str) -> str:
        """
        Get a required configuration value.

        Raises:
            ConfigurationError: If the value is not set anywhere
        """
        value = self.get(key)
        if value is None:
            raise ConfigurationError(
                f"Required configuration {env_var_for_key(key)} "
                f"({self.parameter_prefix}/{key}) not found"
            )
        return value

    def is_set(self, key: str) -> bool:
        return self.get(key) is not None

    def load_supabase_config(self) -> Dict[str, str | None]:
        """
        Load Supabase connection settings.

        The service-role key is preferred for database calls; the anon key is
        the fallback and is also needed for API-based token checks.
        """
        return {
            "url": self.get_required("supabase/url").rstrip("/"),
            "anon_key": self.get("supabase/anon-key"),
            "service_role_key": self.get("supabase/service-role-key"),
            "jwt_secret": self.get("supabase/jwt-secret"),
        }

    def load_revenuecat_config(self) -> Dict[str, str | None]:
        return {
            "api_key": self.get("revenuecat/api-key"),
            "api_url": self.get("revenuecat/api-url", "https://api.revenuecat.com/v1"),
        }

    @property
    def environment(self) -> str:
        return self.get("app/environment", "development")


# Global config instance
config = ParameterStoreConfig()


def clear_cache():
    """Clear parameter cache. Useful for testing or config updates."""
    get_parameter.cache_clear()
    config._config_cache.clear()
    logger.info("Parameter Store cache cleared")
