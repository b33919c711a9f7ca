"""Configuration management with Pydantic Settings.

Settings are opt-in: ``Robot`` never reads the environment by itself,
but ``Robot.from_settings`` can build a robot from ``DINGTALK_*``
environment variables or a ``.env`` file.
"""

from __future__ import annotations

from functools import lru_cache
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Query parameters that carry credentials in robot webhook URLs
SECRET_QUERY_PARAMS = frozenset({"access_token", "key", "sign"})


class NotifierSettings(BaseSettings):
    """DingTalk robot settings.

    Example:
        ```python
        from dingtalk_notifier import Robot
        from dingtalk_notifier.config import get_settings

        robot = Robot.from_settings(get_settings())
        robot.send_text("deploy finished", None, False)
        ```
    """

    model_config = SettingsConfigDict(
        env_prefix="DINGTALK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    webhook_url: SecretStr = Field(
        alias="DINGTALK_WEBHOOK_URL",
        description="Robot webhook URL including its access token",
    )
    timeout: float | None = Field(
        default=None,
        alias="DINGTALK_TIMEOUT",
        description="HTTP timeout in seconds (transport default when unset)",
        gt=0,
    )

    @field_validator("webhook_url")
    @classmethod
    def validate_webhook_url(cls, v: SecretStr) -> SecretStr:
        """Validate webhook URL format."""
        if not v.get_secret_value().startswith(("http://", "https://")):
            raise ValueError("DINGTALK_WEBHOOK_URL must be an HTTP(S) URL")
        return v

    def redacted_summary(self) -> dict[str, str]:
        """Get a summary of settings with secrets redacted."""
        return {
            "webhook_url": redact_webhook_url(self.webhook_url.get_secret_value()),
            "timeout": str(self.timeout) if self.timeout is not None else "(default)",
        }


def redact_webhook_url(url: str) -> str:
    """Mask credential query parameters in a webhook URL."""
    parts = urlsplit(url)
    if not parts.query:
        return url
    query = [
        (name, "***" if name in SECRET_QUERY_PARAMS else value)
        for name, value in parse_qsl(parts.query, keep_blank_values=True)
    ]
    return urlunsplit(parts._replace(query=urlencode(query, safe="*")))


@lru_cache(maxsize=1)
def get_settings() -> NotifierSettings:
    """Get the settings singleton.

    Raises:
        ValidationError: If DINGTALK_WEBHOOK_URL is missing or invalid.
    """
    return NotifierSettings()  # type: ignore[call-arg]


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Useful for testing when you need to reload settings with
    different environment variables.
    """
    get_settings.cache_clear()
