"""Mafia party game engine: roles, lifecycle and win conditions."""

from .engine import ActionResult, MafiaEngine
from .registry import GameRegistry

__all__ = ["ActionResult", "MafiaEngine", "GameRegistry"]
