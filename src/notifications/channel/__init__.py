"""Channel adapter registry — pluggable notification dispatch channels.

Provides singleton access to channel adapters. The fake email adapter is
used by default; set EMAIL_ADAPTER=sendgrid (with SENDGRID_API_KEY and
EMAIL_FROM) to deliver real mail.
"""

import os

from notifications.notification.notification import NotificationChannel

_channel_instances: dict[str, object] = {}


def _build_email_adapter():
    adapter = os.environ.get("EMAIL_ADAPTER", "fake").lower()
    if adapter == "sendgrid":
        from notifications.channel.sendgrid_email import SendGridEmailAdapter

        return SendGridEmailAdapter(
            api_key=os.environ["SENDGRID_API_KEY"],
            from_email=os.environ["EMAIL_FROM"],
        )
    if adapter == "fake":
        from notifications.channel.fake_email import FakeEmailAdapter

        return FakeEmailAdapter()
    raise ValueError(f"Unknown email adapter: {adapter}")


def get_channel(channel_type: str):
    """Return the configured channel adapter (singleton per channel type).

    Args:
        channel_type: A NotificationChannel enum value (only "Email" today)
    """
    if channel_type not in _channel_instances:
        if channel_type == NotificationChannel.EMAIL.value:
            _channel_instances[channel_type] = _build_email_adapter()
        else:
            raise ValueError(f"Unknown channel type: {channel_type}")

    return _channel_instances[channel_type]


def set_channel(channel_type: str, adapter) -> None:
    """Install a specific adapter (used by tests)."""
    _channel_instances[channel_type] = adapter


def reset_channels():
    """Reset all channel singletons (useful for testing)."""
    _channel_instances.clear()
