"""API token precondition for commands that talk to the service."""

import structlog

from depaudit.core.config import Config
from depaudit.core.errors import MissingApiTokenError

logger = structlog.get_logger()


async def api_token_exists(command: str, config: Config) -> str:
    """Ensure an API token is configured before running a command.

    Args:
        command: Command name, used in the error message (e.g. "depaudit test")
        config: Loaded configuration

    Returns:
        The configured token

    Raises:
        MissingApiTokenError: If no token is configured
    """
    if not config.api_token:
        logger.debug("api_token_missing", command=command)
        raise MissingApiTokenError(
            f"`{command}` requires an authenticated account. "
            "Please set DEPAUDIT_TOKEN and try again."
        )
    return config.api_token
