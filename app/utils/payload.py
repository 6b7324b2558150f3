import time
from collections.abc import Mapping

from app.schemas.notification import NotificationContent, Scalar

DEFAULT_NOTIFICATION_TYPE = "info"
CLICK_ACTION = "OPEN_APP"


def coerce_scalar(value: Scalar) -> str:
    """
    Render a scalar the way FCM data payloads expect it (text only).
    Booleans become "true"/"false", integral floats drop the fractional part.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def coerce_data(data: Mapping[str, Scalar] | None) -> dict[str, str]:
    if not data:
        return {}
    return {key: coerce_scalar(value) for key, value in data.items() if value is not None}


def build_notification_content(
    title: str,
    body: str,
    data: Mapping[str, Scalar] | None = None,
    timestamp_ms: int | None = None,
) -> NotificationContent:
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)

    extra = coerce_data(data)
    payload = {
        "title": title,
        "body": body,
        "type": extra.get("type") or DEFAULT_NOTIFICATION_TYPE,
        "click_action": CLICK_ACTION,
        "timestamp": str(timestamp_ms),
    }
    # caller-provided keys override the defaults above
    payload.update(extra)
    return NotificationContent(title=title, body=body, data=payload)
