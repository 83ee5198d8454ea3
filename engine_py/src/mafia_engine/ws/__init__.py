"""
WebSocket server and event handling for the Mafia game.
"""

from .events import *
from .server import app

__all__ = ["app"]
