"""ledbar -- status-bar companion for a remote LED controller.

Mirrors the controller's state (power, brightness, palette) as a single
status line and relays scroll/click commands from the bar back to it.
The whole pipeline is supervised: any failure tears the run down and
restarts it after a fixed backoff.
"""

__version__ = "0.1.0"
