from app.services.notifications.channels import (
    HttpChannel,
    LoggingChannel,
    MemoryChannel,
    NotificationChannel,
    PublishError,
)
from app.services.notifications.events import EventName
from app.services.notifications.relay import OutboxRelay

__all__ = [
    "EventName",
    "HttpChannel",
    "LoggingChannel",
    "MemoryChannel",
    "NotificationChannel",
    "OutboxRelay",
    "PublishError",
]
