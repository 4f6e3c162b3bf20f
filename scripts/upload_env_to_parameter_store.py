#!/usr/bin/env python3
"""
Upload environment variables to AWS Parameter Store.

This script reads the Supabase and RevenueCat settings from a .env file and
uploads them under the API's Parameter Store prefix, encrypting keys and
secrets.
"""

import os
import sys
from pathlib import Path

import boto3
import click
from botocore.exceptions import ClientError
from dotenv import load_dotenv

# Parameter Store key -> environment variable it is read from
PARAMETER_ENV_VARS = {
    "supabase/url": "SUPABASE_URL",
    "supabase/anon-key": "SUPABASE_ANON_KEY",
    "supabase/service-role-key": "SUPABASE_SERVICE_ROLE_KEY",
    "supabase/jwt-secret": "SUPABASE_JWT_SECRET",
    "revenuecat/api-key": "REVENUECAT_API_KEY",
    "revenuecat/api-url": "REVENUECAT_API_URL",
    "app/environment": "APP_ENVIRONMENT",
}


def is_sensitive(param_name: str) -> bool:
    name = param_name.lower()
    return "secret" in name or "key" in name


def load_env_file(env_file_path: str = ".env") -> dict:
    """
    Load the API's settings from a .env file.

    Args:
        env_file_path: Path to .env file

    Returns:
        Dictionary of Parameter Store keys to values, unset ones omitted
    """
    if not Path(env_file_path).exists():
        click.secho(f"Error: {env_file_path} file not found", fg="red", err=True)
        sys.exit(1)

    load_dotenv(env_file_path)

    parameters = {
        key: os.getenv(env_var) for key, env_var in PARAMETER_ENV_VARS.items()
    }
    parameters = {k: v for k, v in parameters.items() if v}

    if "supabase/url" not in parameters:
        click.secho("Warning: SUPABASE_URL not found in .env file", fg="yellow")
        click.echo("Expected variables: " + ", ".join(PARAMETER_ENV_VARS.values()))

    return parameters


def upload_parameters(
    parameters: dict, parameter_prefix: str = "/habit-tracker", dry_run: bool = False
) -> None:
    """
    Upload parameters to AWS Parameter Store.

    Args:
        parameters: Dictionary of parameter names to values
        parameter_prefix: Prefix for parameter names
        dry_run: If True, only print what would be uploaded
    """
    if not parameters:
        click.secho("No parameters to upload", fg="yellow")
        return

    if dry_run:
        click.secho("DRY RUN - Would upload the following parameters:", fg="blue")
        for param_name, value in parameters.items():
            full_name = f"{parameter_prefix}/{param_name}"
            shown = "********" if is_sensitive(param_name) else value
            click.echo(f"  {full_name} = {shown}")
        return

    ssm = boto3.client("ssm")

    with click.progressbar(parameters.items(), label="Uploading parameters") as items:
        for param_name, value in items:
            full_name = f"{parameter_prefix}/{param_name}"
            parameter_type = "SecureString" if is_sensitive(param_name) else "String"

            try:
                response = ssm.put_parameter(
                    Name=full_name,
                    Value=value,
                    Type=parameter_type,
                    Description=f"Habit tracker API setting: {param_name}",
                    Overwrite=True,
                )

                click.secho(
                    f"Uploaded {full_name} as {parameter_type} "
                    f"(version {response['Version']})",
                    fg="green",
                )

            except ClientError as e:
                click.secho(f"Failed to upload {full_name}: {e}", fg="red", err=True)


def verify_parameters(
    parameters: dict, parameter_prefix: str = "/habit-tracker"
) -> bool:
    """
    Verify that parameters were uploaded correctly.

    Returns:
        True if every parameter was found
    """
    click.secho("\nVerifying uploaded parameters...", fg="blue")
    ssm = boto3.client("ssm")
    all_found = True

    for param_name in parameters:
        full_name = f"{parameter_prefix}/{param_name}"

        try:
            response = ssm.get_parameter(Name=full_name, WithDecryption=True)
            click.secho(
                f"{full_name} exists (version {response['Parameter']['Version']})",
                fg="green",
            )
        except ClientError as e:
            all_found = False
            if e.response["Error"]["Code"] == "ParameterNotFound":
                click.secho(f"{full_name} not found", fg="red")
            else:
                click.secho(f"Error checking {full_name}: {e}", fg="red")

    return all_found


@click.command()
@click.option("--env-file", default=".env", help="Path to .env file", show_default=True)
@click.option(
    "--prefix",
    default="/habit-tracker",
    help="Parameter Store prefix",
    show_default=True,
)
@click.option(
    "--dry-run", is_flag=True, help="Show what would be uploaded without uploading"
)
@click.option("--verify", is_flag=True, help="Verify parameters after upload")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def main(env_file: str, prefix: str, dry_run: bool, verify: bool, verbose: bool):
    """
    Upload Supabase and RevenueCat settings from a .env file to Parameter Store.
    """
    if verbose:
        click.secho(f"Loading environment variables from {env_file}", fg="blue")

    parameters = load_env_file(env_file)

    if not parameters:
        click.secho("No parameters found to upload", fg="red", err=True)
        sys.exit(1)

    click.secho(f"Found {len(parameters)} parameters", fg="green")

    if verbose:
        for param_name in parameters:
            click.echo(f"  - {param_name}")

    upload_parameters(parameters, prefix, dry_run)

    if dry_run:
        click.secho("\nDry run complete. Nothing was uploaded.", fg="blue")
        return

    if verify and not verify_parameters(parameters, prefix):
        sys.exit(1)

    click.secho("\nParameter upload complete!", fg="green")
    click.echo(f"Parameters are now available at prefix: {prefix}")


if __name__ == "__main__":
    main()
