"""Configuration management for the Runtime Insight integration.

Configuration is loaded from environment variables.
"""

from __future__ import annotations

import os
from enum import StrEnum
from functools import lru_cache
from typing import Annotated

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class AppEnvironment(StrEnum):
    LOCAL = "local"
    TEST = "test"
    STAGING = "staging"
    PROD = "prod"


class LogLevel(StrEnum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def _split_csv(v: str | list[str]) -> list[str]:
    if isinstance(v, str):
        return [item.strip() for item in v.split(",") if item.strip()]
    return v


class AppConfig(BaseSettings):
    name: str = Field(default="runtime-insight")
    env: AppEnvironment = Field(default=AppEnvironment.LOCAL)
    version: str = Field(default="0.1.0")
    log_level: LogLevel = Field(default=LogLevel.INFO)

    model_config = SettingsConfigDict(env_prefix="APP_")

    @field_validator("env", mode="before")
    @classmethod
    def validate_env(cls, v: str | AppEnvironment) -> AppEnvironment:
        if isinstance(v, AppEnvironment):
            return v
        return AppEnvironment(v)

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        if isinstance(v, LogLevel):
            return v
        return LogLevel(v.upper())


class ServerConfig(BaseSettings):
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    workers: int = Field(default=4)

    model_config = SettingsConfigDict(env_prefix="SERVER_")


class ObservabilityConfig(BaseSettings):
    service_name: str = Field(default="runtime-insight")
    otlp_endpoint: str | None = Field(
        default=None,
        validation_alias=AliasChoices("exporter_otlp_endpoint", "otlp_endpoint"),
    )
    otlp_insecure: bool = Field(
        default=True,
        validation_alias=AliasChoices("exporter_otlp_insecure", "otlp_insecure"),
    )
    log_record_format: str = Field(default="json")

    model_config = SettingsConfigDict(env_prefix="OTEL_")

    @model_validator(mode="after")
    def apply_exporter_env_fallbacks(self) -> ObservabilityConfig:
        """Support standard OpenTelemetry env names used in container orchestration."""
        if not self.otlp_endpoint:
            endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT") or os.getenv("OTEL_OTLP_ENDPOINT")
            if endpoint:
                self.otlp_endpoint = endpoint

        insecure = os.getenv("OTEL_EXPORTER_OTLP_INSECURE")
        if insecure is not None:
            self.otlp_insecure = insecure.strip().lower() in {"1", "true", "yes", "on"}

        return self


class RuntimeInsightConfig(BaseSettings):
    """Switches controlling where exception explanations are collected."""

    enabled: bool = Field(default=True)
    # Comma-separated in the environment, e.g. RUNTIME_INSIGHT_ENVIRONMENTS=local,staging
    environments: Annotated[list[str], NoDecode] = Field(default=["local", "staging"])
    disabled_environments: Annotated[list[str], NoDecode] = Field(default=["prod"])
    # Filter for the explanation logger only; independent of APP_LOG_LEVEL.
    log_level: LogLevel = Field(default=LogLevel.DEBUG)

    model_config = SettingsConfigDict(env_prefix="RUNTIME_INSIGHT_")

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        if isinstance(v, LogLevel):
            return v
        return LogLevel(v.upper())

    @field_validator("environments", "disabled_environments", mode="before")
    @classmethod
    def validate_environment_lists(cls, v: str | list[str]) -> list[str]:
        return _split_csv(v)

    def is_enabled(self, env: str | None = None) -> bool:
        """Return whether explanations should be collected in ``env``.

        The master switch wins, then the disabled list, then membership of
        the allowed list. Without an environment only the switch applies.
        """
        if not self.enabled:
            return False
        if env is None:
            return True
        env = str(env)
        if env in self.disabled_environments:
            return False
        return env in self.environments


class Settings(BaseSettings):
    app: AppConfig = Field(default_factory=AppConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
    runtime_insight: RuntimeInsightConfig = Field(default_factory=RuntimeInsightConfig)

    @model_validator(mode="after")
    def validate_security_settings(self) -> Settings:
        if self.app.env == AppEnvironment.PROD and self.observability.otlp_insecure:
            if self.observability.otlp_endpoint:
                raise ValueError("OTLP insecure mode is not allowed in production")
        return self

    @property
    def runtime_insight_enabled(self) -> bool:
        return self.runtime_insight.is_enabled(self.app.env.value)


@lru_cache
def get_settings() -> Settings:
    return Settings()


def reload_settings() -> Settings:
    get_settings.cache_clear()
    return get_settings()
