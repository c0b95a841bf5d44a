from django.apps import AppConfig  # type: ignore


class SubscriptionsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.subscriptions"
    verbose_name = "Subscriptions"

    def ready(self) -> None:  # pragma: no cover - import side effects
        from . import handlers, signals  # noqa: F401

        handlers.register()
