"""Configuration and logging setup for the SFTPGo admin client."""

import logging
import os
import pathlib

import pydantic
import structlog

from . import restapi

CONFIG_ENV_VAR = "SFTPGO_ADMIN_CONFIG_PATH"
logger = structlog.get_logger(__name__)


class ClientConfig(pydantic.BaseModel):
    """Configuration for the SFTPGo admin client."""

    url: str = pydantic.Field(description="Base URL of the SFTPGo server")
    username: str = pydantic.Field(description="Admin username for token issuance")
    password: pydantic.SecretStr = pydantic.Field(
        description="Admin password for token issuance",
    )
    timeout: float = pydantic.Field(
        restapi.DEFAULT_TIMEOUT,
        description="API request timeout in seconds",
        gt=0,
    )
    token_timeout: float = pydantic.Field(
        restapi.DEFAULT_TOKEN_TIMEOUT,
        description="Token request timeout in seconds",
        gt=0,
    )
    log_level: str = pydantic.Field("INFO", description="Logging level")


def configure_logging(log_level_name: str) -> None:
    """Configure structlog for logfmt output.

    Unknown level names fall back to INFO.
    """
    log_level = logging.getLevelName(log_level_name.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.EventRenamer("msg"),
        structlog.processors.format_exc_info,
        structlog.processors.LogfmtRenderer(
            key_order=("timestamp", "level", "msg"),
        ),
    ]
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def load_config(config_path: str) -> ClientConfig:
    """Load and validate configuration from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        pydantic.ValidationError: If the file is not valid JSON or does not
            describe a valid configuration.
    """
    path = pathlib.Path(config_path)
    try:
        content = path.read_text()
    except FileNotFoundError:
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg) from None
    return ClientConfig.model_validate_json(content)


def create_client(config: ClientConfig) -> restapi.SftpgoApiClient:
    """Construct the API client from validated config."""
    client = restapi.SftpgoApiClient(
        base_url=config.url,
        username=config.username,
        password=config.password.get_secret_value(),
        timeout=config.timeout,
        token_timeout=config.token_timeout,
    )
    logger.info("Created SFTPGo API client", base_url=client.base_url)
    return client


def create_client_from_config(
    config_path: str | None = None,
) -> restapi.SftpgoApiClient:
    """Create the API client using a config path or environment default."""
    resolved_path = config_path or os.environ.get(CONFIG_ENV_VAR, "/config.json")
    config = load_config(resolved_path)
    configure_logging(config.log_level)
    return create_client(config)
