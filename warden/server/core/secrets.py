"""
AWS Secrets Manager settings source.

Production deployments keep credentials (database URL, session secret, bot
token) in a single JSON secret. When ``WARDEN_AWS_SECRET_ID`` is set, this
source is placed in front of the environment so the secret's keys win over
env variables and the .env file. A failed fetch falls back to the
environment instead of aborting startup; validation of the resulting
values still happens in ``Settings``.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional, Tuple

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from warden.core.logging_config import get_logger

logger = get_logger(__name__)


def fetch_secret_values(secret_id: str, region_name: Optional[str] = None) -> Dict[str, Any]:
    """
    Fetch a JSON secret from AWS Secrets Manager.

    Args:
        secret_id: Secret name or ARN
        region_name: AWS region of the secret

    Returns:
        The decoded key/value mapping, or an empty dict when the secret is
        unavailable or not a JSON object.
    """
    try:
        client = boto3.client("secretsmanager", region_name=region_name)
        response = client.get_secret_value(SecretId=secret_id)
    except (BotoCoreError, ClientError) as e:
        logger.warning(f"Could not load secrets from AWS Secrets Manager ({secret_id}): {e}. Falling back to environment.")
        return {}

    secret_string = response.get("SecretString")
    if not secret_string:
        logger.warning(f"Secret {secret_id} has no SecretString payload, falling back to environment")
        return {}

    try:
        values = json.loads(secret_string)
    except json.JSONDecodeError:
        logger.warning(f"Secret {secret_id} is not valid JSON, falling back to environment")
        return {}

    if not isinstance(values, dict):
        logger.warning(f"Secret {secret_id} must be a JSON object, falling back to environment")
        return {}

    logger.info(f"Loaded {len(values)} configuration values from AWS Secrets Manager")
    return values


class AWSSecretsManagerSource(PydanticBaseSettingsSource):
    """Settings source that reads field aliases from one JSON secret."""

    def __init__(self, settings_cls: type[BaseSettings], secret_id: str, region_name: Optional[str] = None) -> None:
        super().__init__(settings_cls)
        self.secret_id = secret_id
        self.region_name = region_name
        self._values: Optional[Dict[str, Any]] = None

    @property
    def values(self) -> Dict[str, Any]:
        if self._values is None:
            self._values = fetch_secret_values(self.secret_id, self.region_name)
        return self._values

    def get_field_value(self, field: FieldInfo, field_name: str) -> Tuple[Any, str, bool]:
        key = field.alias or field_name
        return self.values.get(key), key, False

    def __call__(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for field_name, field in self.settings_cls.model_fields.items():
            value, key, _ = self.get_field_value(field, field_name)
            if value is not None:
                data[key] = value
        return data
