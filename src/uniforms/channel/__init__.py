"""Notification channel registry — where restock and conversion notices go.

Delivery itself is an external concern. The in-app channel records notices in
memory by default; deployments swap in a real adapter by registering it.
"""

_channel_instances: dict[str, object] = {}

IN_APP = "InApp"


def get_channel(channel_type: str = IN_APP):
    """Return the configured channel adapter (singleton per channel type)."""
    if channel_type not in _channel_instances:
        if channel_type == IN_APP:
            from uniforms.channel.fake_notifier import FakeNotificationAdapter

            _channel_instances[channel_type] = FakeNotificationAdapter()
        else:
            raise ValueError(f"Unknown channel type: {channel_type}")

    return _channel_instances[channel_type]


def register_channel(adapter, channel_type: str = IN_APP):
    _channel_instances[channel_type] = adapter


def reset_channels():
    """Reset all channel singletons (useful for testing)."""
    _channel_instances.clear()
