"""
Game configuration and validation.
"""

from pydantic import BaseModel, Field, field_validator

from .constants import DEFAULT_MAFIA_COUNT, DEFAULT_PLAYERS_COUNT


class GameConfig(BaseModel):
    """Size of a game: seats excluding the owner, and the mafia share of them."""

    max_players: int = Field(
        default=DEFAULT_PLAYERS_COUNT,
        ge=3,
        le=50,
        description="Number of players needed to start, owner excluded"
    )
    max_mafia: int = Field(
        default=DEFAULT_MAFIA_COUNT,
        ge=1,
        description="Mafia faction size, Don included"
    )

    @field_validator('max_mafia')
    @classmethod
    def validate_max_mafia(cls, v, info):
        """Leave room for the Sheriff and the Doctor."""
        max_players = info.data.get('max_players')
        if max_players is not None and v + 2 > max_players:
            raise ValueError(
                f'max_mafia ({v}) leaves no room for Sheriff and Doctor with {max_players} players'
            )
        return v


# Default configuration instance
default_rules = GameConfig()


def create_rules(**overrides) -> GameConfig:
    """Create a GameConfig with optional overrides."""
    config_dict = default_rules.model_dump()
    config_dict.update({k: v for k, v in overrides.items() if v is not None})
    return GameConfig(**config_dict)
