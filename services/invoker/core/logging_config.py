from services.common.core.logging_config import setup_logging as common_setup_logging

from ..config import config


def setup_logging(log_format: str = "plain"):
    """
    Load the YAML config and initialize logging.
    LOG_FORMAT selects the `plain` or `json` formatter.
    """
    common_setup_logging(
        config.LOG_CONFIG_PATH,
        default_level=config.LOG_LEVEL,
        defaults={"LOG_FORMAT": log_format},
    )
