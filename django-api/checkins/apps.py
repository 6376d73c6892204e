from django.apps import AppConfig


class CheckinsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "checkins"
    verbose_name = "Venue check-ins"

    def ready(self) -> None:
        from checkins import signals  # noqa: F401
