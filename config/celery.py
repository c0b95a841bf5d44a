import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("fintrack")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Lapsed premium and trial subscriptions, daily at midnight
    "expire-lapsed-subscriptions": {
        "task": "subscriptions.expire_lapsed_subscriptions",
        "schedule": crontab(minute=0, hour=0),
    },
}

app.conf.timezone = "Asia/Jakarta"
