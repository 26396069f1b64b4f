"""Service configuration loading."""

from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigurationError
from .logging_config import get_logger
from .models import ServiceConfig


def load_config(path: str) -> ServiceConfig:
    """
    Read the JSON configuration file at ``path``.

    Example file::

        {"port": 8080, "bucket": "thumbnails", "region": "eu-west-1"}

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    logger = get_logger("img-thumbnailer.config")
    try:
        with open(path, "r", encoding="utf-8") as fh:
            raw = fh.read()
    except OSError as exc:
        raise ConfigurationError(f"cannot read configuration file {path}: {exc}") from exc

    try:
        config = ServiceConfig.model_validate_json(raw)
    except PydanticValidationError as exc:
        raise ConfigurationError(f"invalid configuration in {path}: {exc}") from exc

    logger.info(
        f"Loaded configuration from {path} "
        f"(port={config.port}, bucket={config.bucket}, region={config.region})"
    )
    return config
