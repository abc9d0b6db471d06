"""Shared AWS helpers for service clients."""

from __future__ import annotations

from typing import Any

import boto3
from botocore.config import Config

from app.config.settings import AwsConfig


def create_boto3_client(
    service_name: str,
    aws: AwsConfig,
    *,
    region_name: str | None = None,
    aws_access_key_id: str | None = None,
    aws_secret_access_key: str | None = None,
    read_timeout: float | None = None,
) -> boto3.client:
    """Instantiate a boto3 client using configured credentials if available."""

    region = region_name or aws.region
    client_kwargs: dict[str, Any] = {"region_name": region}
    if aws_access_key_id and aws_secret_access_key:
        client_kwargs["aws_access_key_id"] = aws_access_key_id
        client_kwargs["aws_secret_access_key"] = aws_secret_access_key
    elif aws.access_key and aws.secret_key:
        client_kwargs["aws_access_key_id"] = aws.access_key
        client_kwargs["aws_secret_access_key"] = aws.secret_key
    if read_timeout is not None:
        client_kwargs["config"] = Config(read_timeout=read_timeout, retries={"max_attempts": 2})
    return boto3.client(service_name, **client_kwargs)


__all__ = ["create_boto3_client"]
