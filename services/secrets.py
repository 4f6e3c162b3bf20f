# JWT signing secrets kept in AWS Secrets Manager.
# Both the current and the previous version are returned so tokens signed
# just before a rotation still validate.

import os
from typing import List

import boto3
from botocore.exceptions import ClientError

from utils.logging import setup_logger

logger = setup_logger(__name__)


def get_secret(secret_name: str, version_stage: str = "AWSCURRENT") -> str:
    """
    Get secret from AWS Secrets Manager.

    Args:
        secret_name: Name or ARN of the secret
        version_stage: The version stage to retrieve (AWSCURRENT or AWSPREVIOUS)

    Returns:
        The secret string value
    """
    region_name = os.getenv("AWS_REGION", "us-east-1")

    session = boto3.session.Session()
    client = session.client(service_name="secretsmanager", region_name=region_name)

    response = client.get_secret_value(SecretId=secret_name, VersionStage=version_stage)
    return response["SecretString"]


def get_all_secret_versions(secret_name: str) -> List[str]:
    """
    Get the current and previous secret versions for JWT validation.

    A missing version (e.g. no rotation has happened yet) is skipped.
    """
    secrets = []

    for stage in ("AWSCURRENT", "AWSPREVIOUS"):
        try:
            value = get_secret(secret_name, stage)
        except ClientError as e:
            logger.info(
                "Secret version unavailable",
                extra={
                    "secret_name": secret_name,
                    "version_stage": stage,
                    "error_code": e.response["Error"]["Code"],
                },
            )
            continue

        if value and value not in secrets:
            secrets.append(value)

    return secrets
