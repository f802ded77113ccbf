"""Configuration loaded from the environment (and .env)."""

__version__ = "0.1.0"

import os
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from dotenv import load_dotenv

from guildwatch.domain.models import BotCredentials

load_dotenv()

DEFAULT_NOTIFICATION_TIME = "09:00"
DEFAULT_NOTIFICATION_TZ = "UTC"
DEFAULT_REQUEST_TIMEOUT = 10.0


class ConfigError(ValueError):
    """Required configuration is missing or malformed."""


def parse_id_list(raw: str) -> List[str]:
    """Split a comma-separated id list, dropping blanks. Order and duplicates are kept."""
    return [part.strip() for part in raw.split(",") if part.strip()]


def parse_pairs(raw: str) -> Dict[str, str]:
    """Parse ``BOT_ID:VALUE,BOT_ID:VALUE``.

    Only the first colon separates key from value so URLs like
    ``https://host:8080/stats`` survive. Malformed entries are skipped.
    """
    pairs: Dict[str, str] = {}
    for entry in raw.split(","):
        key, sep, value = entry.strip().partition(":")
        key, value = key.strip(), value.strip()
        if sep and key and value:
            pairs[key] = value
    return pairs


@dataclass
class AppConfig:
    """Typed configuration, built once at startup and passed to components."""

    discord_token: str = ""
    channel_id: int = 0
    target_bot_ids: List[str] = field(default_factory=list)
    topgg_token: str = ""
    notification_time: str = DEFAULT_NOTIFICATION_TIME
    notification_tz: str = DEFAULT_NOTIFICATION_TZ
    custom_webhooks: Dict[str, str] = field(default_factory=dict)
    bot_tokens: Dict[str, str] = field(default_factory=dict)
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """Create AppConfig from environment variables."""
        env = os.environ if environ is None else environ

        # TARGET_BOT_ID is the single-bot form kept for older deployments
        targets = env.get("TARGET_BOT_IDS", "") or env.get("TARGET_BOT_ID", "")

        channel_raw = env.get("CHANNEL_ID", "").strip()
        try:
            channel_id = int(channel_raw) if channel_raw else 0
        except ValueError:
            raise ConfigError(f"CHANNEL_ID must be numeric, got {channel_raw!r}")

        timeout_raw = env.get("REQUEST_TIMEOUT_SECONDS", "").strip()
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_REQUEST_TIMEOUT
        except ValueError:
            raise ConfigError(f"REQUEST_TIMEOUT_SECONDS must be a number, got {timeout_raw!r}")

        return cls(
            discord_token=env.get("DISCORD_TOKEN", "").strip(),
            channel_id=channel_id,
            target_bot_ids=parse_id_list(targets),
            topgg_token=env.get("TOPGG_TOKEN", "").strip(),
            notification_time=env.get("NOTIFICATION_TIME", "").strip() or DEFAULT_NOTIFICATION_TIME,
            notification_tz=env.get("NOTIFICATION_TZ", "").strip() or DEFAULT_NOTIFICATION_TZ,
            custom_webhooks=parse_pairs(env.get("CUSTOM_WEBHOOKS", "")),
            bot_tokens=parse_pairs(env.get("BOT_TOKENS", "")),
            request_timeout=timeout,
        )

    def validate(self) -> None:
        """Raise ConfigError if anything required is missing."""
        missing = []
        if not self.discord_token:
            missing.append("DISCORD_TOKEN")
        if not self.channel_id:
            missing.append("CHANNEL_ID")
        if not self.target_bot_ids:
            missing.append("TARGET_BOT_IDS")
        if missing:
            raise ConfigError(
                "Missing required environment variables: " + ", ".join(missing)
            )
        if self.request_timeout <= 0:
            raise ConfigError("REQUEST_TIMEOUT_SECONDS must be positive")

    def credentials_for(self, bot_id: str) -> BotCredentials:
        return BotCredentials(
            push_url=self.custom_webhooks.get(bot_id, ""),
            api_token=self.bot_tokens.get(bot_id, ""),
            topgg_token=self.topgg_token,
        )
