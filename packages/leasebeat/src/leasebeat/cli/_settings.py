"""Settings resolution for CLI commands."""

import typer
from pydantic import ValidationError

from leasebeat.cli._console import error_panel
from leasebeat.config import Settings


def load_settings(redis_url: str | None) -> Settings:
    """Build settings from the environment, applying the --redis-url override.

    Invalid configuration is reported and exits with status 1.
    """
    try:
        settings = Settings()
    except ValidationError as e:
        error_panel(str(e), title="Configuration error")
        raise typer.Exit(1)
    if redis_url:
        settings = settings.model_copy(update={"redis_url": redis_url})
    return settings
