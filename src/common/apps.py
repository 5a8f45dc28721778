import structlog
from django.apps import AppConfig

logger = structlog.get_logger(__name__)


class CommonConfig(AppConfig):
    """Configuration for the common app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "common"

    def ready(self) -> None:
        """Announce the service once Django is fully loaded."""
        from django.conf import settings

        logger.debug(
            "common_app_ready",
            service=getattr(settings, "SERVICE_NAME", "felicity"),
            version=getattr(settings, "VERSION", "unknown"),
        )
