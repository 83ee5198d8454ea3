# engine_py/src/mafia_engine/errors.py

class GameError(Exception):
    """Base exception for game-related errors."""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")

# Specific error codes
ALREADY_IN_GAME = "ALREADY_IN_GAME"
GAME_NOT_FOUND = "GAME_NOT_FOUND"
OWNER_CANNOT_JOIN = "OWNER_CANNOT_JOIN"
GAME_ENDED = "GAME_ENDED"
GAME_FULL = "GAME_FULL"
ALREADY_JOINED = "ALREADY_JOINED"
NOT_AUTHORIZED = "NOT_AUTHORIZED"
NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"
PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"
INVALID_CONFIG = "INVALID_CONFIG"

# Helper function to raise common errors
def raise_error(code: str, message: str):
    raise GameError(code, message)
