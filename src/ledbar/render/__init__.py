"""Status-line rendering for the status bar."""

from ledbar.render.indicator import StartupIndicator
from ledbar.render.status import StatusOutput, format_status

__all__ = ["StartupIndicator", "StatusOutput", "format_status"]
