"""
S3 client creation with credentials loaded from a .env file.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import boto3
from dotenv import load_dotenv

from .exceptions import ConfigurationError


def resolve_env_path(env_path: str | None = None) -> str:
    """
    Determine which .env file should be used for AWS credentials.

    Priority order:
      1. Explicit parameter
      2. AWS_ENV_FILE environment variable
      3. ~/.env
    """
    if env_path:
        return env_path
    aws_env_file = os.environ.get("AWS_ENV_FILE")
    if aws_env_file:
        return aws_env_file
    return str(Path.home() / ".env")


def load_credentials_from_env(env_path: str | None = None) -> tuple[str, str, str | None]:
    """
    Load AWS credentials from a .env file.

    Values already present in the process environment take precedence over
    the file, matching python-dotenv's default behaviour.

    Returns:
        tuple: (aws_access_key_id, aws_secret_access_key, aws_session_token or None)

    Raises:
        ConfigurationError: If the access key pair is not available
    """
    resolved_path = resolve_env_path(env_path)
    load_dotenv(resolved_path)

    aws_access_key_id = os.getenv("AWS_ACCESS_KEY_ID")
    aws_secret_access_key = os.getenv("AWS_SECRET_ACCESS_KEY")
    aws_session_token = os.getenv("AWS_SESSION_TOKEN") or None
    if aws_access_key_id and aws_secret_access_key:
        logging.debug("AWS credentials loaded from %s", resolved_path)
        return aws_access_key_id, aws_secret_access_key, aws_session_token

    raise ConfigurationError(
        f"AWS credentials not found in {resolved_path}. "
        "Set AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY there or in the environment."
    )


def create_s3_client(env_path: str | None = None, region: str | None = None):
    """
    Create a boto3 S3 client using credentials from the .env file.

    Args:
        env_path: Optional .env override
        region: Optional region name; boto3's default resolution applies when omitted

    Raises:
        ConfigurationError: If credentials are missing
    """
    aws_access_key_id, aws_secret_access_key, aws_session_token = load_credentials_from_env(env_path)
    client_kwargs = {
        "aws_access_key_id": aws_access_key_id,
        "aws_secret_access_key": aws_secret_access_key,
    }
    if aws_session_token:
        client_kwargs["aws_session_token"] = aws_session_token
    if region is not None:
        client_kwargs["region_name"] = region
    return boto3.client("s3", **client_kwargs)
