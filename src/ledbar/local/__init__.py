"""Local control endpoint: the Unix socket the status bar writes commands to."""

from ledbar.local.server import AddressInUseError, LocalCommandSource, LocalSourceError

__all__ = ["AddressInUseError", "LocalCommandSource", "LocalSourceError"]
