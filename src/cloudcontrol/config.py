"""Configuration models and the YAML config loader.

Every setting has a default, so the server runs without a config file.  A
YAML file may override any subset::

    server:
      name: aws-cloudcontrol
    aws:
      region: eu-west-1
      profile: ${AWS_PROFILE}
      services:
        cost: false
    http:
      port: 8080
    logging:
      level: DEBUG
    tool_policy:
      policies:
        - pattern: aws_lambda_invoke_function
          action: deny
          reason: read-only deployment
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from cloudcontrol.tools.policy import ToolPolicySettings

DEFAULT_PROTOCOL_VERSION = "2025-06-18"

AWS_SERVICES = ("s3", "ec2", "lambda", "cloudwatch", "sqs", "cost", "general")


class ConfigError(Exception):
    """Raised when a config file cannot be read, parsed or validated."""


class ServerSettings(BaseModel):
    """Fixed metadata returned by ``initialize``."""

    name: str = "aws-cloudcontrol"
    version: str = "1.0.0"
    protocol_version: str = DEFAULT_PROTOCOL_VERSION


class AWSSettings(BaseModel):
    """Region, credentials profile and per-service switches for the AWS tools."""

    region: str | None = None
    profile: str | None = None
    services: dict[str, bool] = Field(default_factory=lambda: dict.fromkeys(AWS_SERVICES, True))

    def service_enabled(self, service: str) -> bool:
        return self.services.get(service, True)


class HTTPSettings(BaseModel):
    host: str = "127.0.0.1"
    port: int = Field(default=3000, ge=1, le=65535)


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"


class TelemetrySettings(BaseModel):
    """Optional tracing configuration."""

    enabled: bool = False
    export_to_console: bool = False
    otlp_endpoint: str | None = None


class CloudControlConfig(BaseModel):
    """Root of the config file."""

    server: ServerSettings = Field(default_factory=ServerSettings)
    aws: AWSSettings = Field(default_factory=AWSSettings)
    http: HTTPSettings = Field(default_factory=HTTPSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)
    tool_policy: ToolPolicySettings = Field(default_factory=ToolPolicySettings)


class ConfigLoader:
    """Load and validate a YAML config file into a :class:`CloudControlConfig`."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> CloudControlConfig:
        """Read YAML, interpolate env vars, and validate.

        ``${VAR}`` and ``$VAR`` references are expanded with
        :func:`os.path.expandvars` before parsing.  An empty file yields the
        defaults.

        Raises:
            ConfigError: On read errors, YAML errors or schema violations.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read {self._path}: {exc}") from exc

        try:
            data: Any = yaml.safe_load(os.path.expandvars(raw))
        except yaml.YAMLError as exc:
            raise ConfigError(f"YAML parse error: {exc}") from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("Config file must contain a mapping")

        try:
            return CloudControlConfig.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc


def load_config(path: str | Path | None = None) -> CloudControlConfig:
    """Load *path* if given, otherwise return the default configuration."""
    if path is None:
        return CloudControlConfig()
    return ConfigLoader(Path(path)).load()
