"""
Local (offline) game module.

Allows playing without a server - hot-seat multiplayer on one device.
"""

from .session import LocalGameSession

__all__ = ["LocalGameSession"]
