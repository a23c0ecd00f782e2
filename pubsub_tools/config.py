"""Configuration settings loaded from environment variables."""

import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

from .errors import ConfigError

PROJECT_ENV = "GOOGLE_CLOUD_PROJECT"


@dataclass(frozen=True)
class PubSubConfig:
    """Pub/Sub connection settings."""
    project_id: str
    timeout: float = 30.0

    @staticmethod
    def from_env() -> 'PubSubConfig':
        """Load from environment variables with validation."""
        project_id = os.getenv(PROJECT_ENV, "").strip()
        if not project_id:
            raise ConfigError(f"{PROJECT_ENV} env variable must be set.")

        timeout = _read_number("PUBSUB_TIMEOUT", "30", float)
        if timeout <= 0:
            raise ConfigError(f"PUBSUB_TIMEOUT must be positive, got {timeout}")

        return PubSubConfig(project_id=project_id, timeout=timeout)


@dataclass(frozen=True)
class AppConfig:
    """Complete quickstart configuration."""
    pubsub: PubSubConfig
    topic_name: str
    message_count: int
    publish_interval: float
    log_level: str

    @staticmethod
    def from_env() -> 'AppConfig':
        """Load complete configuration from environment."""
        pubsub = PubSubConfig.from_env()

        message_count = _read_number("PUBSUB_MESSAGE_COUNT", "10", int)
        if message_count <= 0:
            raise ConfigError(f"PUBSUB_MESSAGE_COUNT must be positive, got {message_count}")

        publish_interval = _read_number("PUBSUB_PUBLISH_INTERVAL", "1.0", float)
        if publish_interval < 0:
            raise ConfigError(f"PUBSUB_PUBLISH_INTERVAL must not be negative, got {publish_interval}")

        topic_name = os.getenv("PUBSUB_TOPIC", "example-topic").strip()
        if not topic_name:
            raise ConfigError("PUBSUB_TOPIC must not be blank")

        return AppConfig(
            pubsub=pubsub,
            topic_name=topic_name,
            message_count=message_count,
            publish_interval=publish_interval,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper()
        )


def _read_number(name, default, cast):
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError as e:
        raise ConfigError(f"Invalid {name} value {raw!r}: {e}")


def load_config() -> AppConfig:
    """Load configuration from a .env file in the working directory and the environment."""
    # existing environment variables take precedence over .env entries
    load_dotenv(find_dotenv(usecwd=True))

    return AppConfig.from_env()
