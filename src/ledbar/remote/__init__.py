"""Remote state channel to the lighting controller.

Two interchangeable transports are provided; ``create_channel`` picks one
from the ``remote`` settings section.
"""

from __future__ import annotations

from ledbar.config.settings import RemoteConfig
from ledbar.remote.base import RemoteChannel, RemoteChannelError
from ledbar.remote.http_channel import HttpChannel
from ledbar.remote.websocket_channel import WebSocketChannel


def create_channel(config: RemoteConfig) -> RemoteChannel:
    """Build a fresh, unconnected channel for one pipeline run."""
    if config.transport == "http":
        return HttpChannel(
            base_url=config.http_base_url,
            poll_interval=config.poll_interval,
            timeout=config.timeout,
        )
    return WebSocketChannel(url=config.websocket_url, timeout=config.timeout)


__all__ = [
    "HttpChannel",
    "RemoteChannel",
    "RemoteChannelError",
    "WebSocketChannel",
    "create_channel",
]
