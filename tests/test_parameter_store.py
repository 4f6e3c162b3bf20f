"""Configuration lookups and the Parameter Store upload script."""

import importlib.util
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError
from click.testing import CliRunner

from services import parameter_store
from services.exceptions import ConfigurationError
from services.parameter_store import ParameterStoreConfig, env_var_for_key


def client_error(code):
    return ClientError({"Error": {"Code": code, "Message": code}}, "GetParameter")


class TestConfig:
    def test_env_var_names(self):
        assert env_var_for_key("supabase/service-role-key") == "SUPABASE_SERVICE_ROLE_KEY"

    def test_environment_wins(self):
        with patch.object(parameter_store, "get_parameter") as get_parameter:
            assert ParameterStoreConfig().get("supabase/url") == (
                "https://project.supabase.co"
            )

        get_parameter.assert_not_called()

    def test_parameter_store_fallback(self, monkeypatch):
        monkeypatch.setenv("PARAMETER_STORE_ENABLED", "true")
        monkeypatch.delenv("SUPABASE_URL")

        with patch.object(
            parameter_store, "get_parameter", return_value="https://ssm.supabase.co"
        ) as get_parameter:
            value = ParameterStoreConfig().get("supabase/url")

        assert value == "https://ssm.supabase.co"
        get_parameter.assert_called_once_with("/habit-tracker/supabase/url")

    def test_parameter_store_disabled_locally(self, monkeypatch):
        monkeypatch.delenv("SUPABASE_URL")

        with patch.object(parameter_store, "get_parameter") as get_parameter:
            assert ParameterStoreConfig().get("supabase/url", "default") == "default"

        get_parameter.assert_not_called()

    def test_get_required(self, monkeypatch):
        monkeypatch.delenv("SUPABASE_URL")

        with pytest.raises(ConfigurationError):
            ParameterStoreConfig().load_supabase_config()

    def test_revenuecat_defaults(self):
        assert ParameterStoreConfig().load_revenuecat_config() == {
            "api_key": None,
            "api_url": "https://api.revenuecat.com/v1",
        }

    def test_missing_parameter_is_none(self, monkeypatch):
        ssm = MagicMock()
        ssm.get_parameter.side_effect = client_error("ParameterNotFound")
        monkeypatch.setattr(parameter_store, "_ssm_client", ssm)

        assert parameter_store.get_parameter("/habit-tracker/missing") is None


def load_upload_script():
    path = Path(__file__).parent.parent / "scripts" / "upload_env_to_parameter_store.py"
    spec = importlib.util.spec_from_file_location("upload_env_to_parameter_store", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestUploadScript:
    @pytest.fixture
    def script(self):
        return load_upload_script()

    def test_dry_run_masks_secrets(self, script, tmp_path, monkeypatch):
        for var in ("SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY"):
            monkeypatch.delenv(var)
        env_file = tmp_path / ".env"
        env_file.write_text(
            "SUPABASE_URL=https://project.supabase.co\n"
            "SUPABASE_SERVICE_ROLE_KEY=very-secret\n"
        )

        result = CliRunner().invoke(
            script.main, ["--env-file", str(env_file), "--dry-run"]
        )

        assert result.exit_code == 0, result.output
        assert "/habit-tracker/supabase/url = https://project.supabase.co" in result.output
        assert "very-secret" not in result.output

    def test_upload_uses_secure_string_for_keys(self, script):
        ssm = MagicMock()
        ssm.put_parameter.return_value = {"Version": 1}

        with patch.object(script.boto3, "client", return_value=ssm):
            script.upload_parameters(
                {"supabase/url": "https://x", "supabase/anon-key": "k"}
            )

        types = {
            call.kwargs["Name"]: call.kwargs["Type"]
            for call in ssm.put_parameter.call_args_list
        }
        assert types == {
            "/habit-tracker/supabase/url": "String",
            "/habit-tracker/supabase/anon-key": "SecureString",
        }

    def test_missing_env_file(self, script, tmp_path):
        result = CliRunner().invoke(
            script.main, ["--env-file", str(tmp_path / "missing.env")]
        )

        assert result.exit_code == 1
