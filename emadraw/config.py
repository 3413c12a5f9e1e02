"""Environment-based configuration for the participant directory connection."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://designer.mydatahelps.org"
DEFAULT_TOKEN_URL = "https://designer.mydatahelps.org/identityserver/connect/token"


@dataclass(frozen=True)
class DirectorySettings:
    """Credentials and endpoints used to reach the participant directory."""

    project_id: str
    service_account: str
    private_key: str
    base_url: str = DEFAULT_BASE_URL
    token_url: str = DEFAULT_TOKEN_URL

    def __repr__(self) -> str:
        # Keep the key out of logs and tracebacks.
        return (
            f"DirectorySettings(project_id={self.project_id!r}, "
            f"service_account={self.service_account!r}, "
            f"base_url={self.base_url!r}, token_url={self.token_url!r})"
        )


def deployment_environment() -> str:
    """Return the deployment mode, ``EMA_ENV`` taking precedence over ``NODE_ENV``."""

    return (os.getenv("EMA_ENV") or os.getenv("NODE_ENV") or "development").lower()


def fetch_secret(secret_name: str, region: Optional[str] = None) -> dict:
    """Read a JSON secret from AWS Secrets Manager.

    Raises
    ------
    ConfigurationError
        If the secret name is empty or its value is not a JSON object.
    """

    if not secret_name:
        raise ConfigurationError("Environment variable 'AWS_SECRET_NAME' is not set")

    import boto3

    client = boto3.client("secretsmanager", region_name=region or os.getenv("AWS_REGION"))
    response = client.get_secret_value(SecretId=secret_name)
    try:
        secret = json.loads(response["SecretString"])
    except (KeyError, ValueError) as e:
        raise ConfigurationError(f"Secret {secret_name!r} is not a JSON string") from e
    if not isinstance(secret, dict):
        raise ConfigurationError(f"Secret {secret_name!r} is not a JSON object")
    return secret


def _unescape_key(private_key: str) -> str:
    # Keys stored on a single line carry literal "\n" sequences.
    return private_key.replace("\\n", "\n")


def settings_from_mapping(values: Mapping[str, Optional[str]]) -> DirectorySettings:
    """Build settings from ``RKS_*`` keys found in ``values``."""

    service_account = values.get("RKS_SERVICE_ACCOUNT")
    private_key = values.get("RKS_PRIVATE_KEY")
    if not service_account or not private_key:
        raise ConfigurationError(
            "RKS service account and RKS private key must be set"
        )
    project_id = values.get("RKS_PROJECT_ID")
    if not project_id:
        raise ConfigurationError("RKS project id must be set")

    return DirectorySettings(
        project_id=project_id,
        service_account=service_account,
        private_key=_unescape_key(private_key),
        base_url=(os.getenv("RKS_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
        token_url=os.getenv("RKS_TOKEN_URL") or DEFAULT_TOKEN_URL,
    )


def load_settings(environment: Optional[str] = None) -> DirectorySettings:
    """Load directory settings for the current deployment mode.

    In ``production`` the credentials come from the AWS secret named by
    ``AWS_SECRET_NAME``. Any other mode reads ``RKS_SERVICE_ACCOUNT``,
    ``RKS_PRIVATE_KEY`` and ``RKS_PROJECT_ID`` from the environment, after
    loading a local ``.env`` file if there is one.
    """

    load_dotenv()
    mode = (environment or deployment_environment()).lower()
    if mode == "production":
        logger.info("Loading directory credentials from the secrets manager")
        secret = fetch_secret(os.getenv("AWS_SECRET_NAME", ""))
        return settings_from_mapping(secret)

    logger.info("Using directory credentials from environment variables")
    return settings_from_mapping(os.environ)


__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_TOKEN_URL",
    "DirectorySettings",
    "deployment_environment",
    "fetch_secret",
    "load_settings",
    "settings_from_mapping",
]
