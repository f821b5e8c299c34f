"""
Match configuration.

Values come from code, from the `game:` mapping of a YAML file, or from
SKIRMISH_* environment variables (a .env file is honoured by the CLI).
"""

import os
import logging
import yaml
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Project data directory (schema/ and scenarios/)
DATA_PATH = Path(__file__).resolve().parent.parent / "data"

DIFFICULTIES = ("easy", "medium", "hard")
MIN_PLAYERS = 2
MAX_PLAYERS = 4


def parse_difficulties(text: str) -> dict[int, str]:
    """Parse "2=hard,3=easy" into {2: "hard", 3: "easy"}."""
    result = {}
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        if "=" not in part:
            raise ValueError(f"Bad difficulty entry '{part}', expected FACTION=LEVEL")
        faction, level = part.split("=", 1)
        result[int(faction.strip())] = level.strip().lower()
    return result


@dataclass
class GameConfig:
    """Settings for one match."""
    players: int = 2
    starting_money: int = 2000
    income_per_turn: int = 500
    actions_per_turn: int = 5
    turn_limit: Optional[int] = None
    bot_difficulties: dict[int, str] = field(default_factory=dict)
    seed: Optional[int] = None
    pacing: bool = False

    def __post_init__(self):
        if not MIN_PLAYERS <= self.players <= MAX_PLAYERS:
            raise ValueError(
                f"players must be between {MIN_PLAYERS} and {MAX_PLAYERS}, got {self.players}"
            )
        if self.actions_per_turn < 1:
            raise ValueError("actions_per_turn must be at least 1")
        if self.starting_money < 0 or self.income_per_turn < 0:
            raise ValueError("money settings cannot be negative")
        if self.turn_limit is not None and self.turn_limit < 1:
            raise ValueError("turn_limit must be positive")

        for faction, level in self.bot_difficulties.items():
            if not 1 <= faction <= self.players:
                raise ValueError(f"Bot faction {faction} is not in play")
            if level not in DIFFICULTIES:
                raise ValueError(f"Unknown difficulty '{level}' (expected one of {DIFFICULTIES})")

    @property
    def factions(self) -> list[int]:
        return list(range(1, self.players + 1))

    def difficulty_for(self, faction: int) -> str:
        return self.bot_difficulties.get(faction, "medium")

    @classmethod
    def from_dict(cls, data: dict) -> "GameConfig":
        bots = data.get("bot_difficulties", {}) or {}
        return cls(
            players=data.get("players", 2),
            starting_money=data.get("starting_money", 2000),
            income_per_turn=data.get("income_per_turn", 500),
            actions_per_turn=data.get("actions_per_turn", 5),
            turn_limit=data.get("turn_limit"),
            bot_difficulties={int(k): str(v).lower() for k, v in bots.items()},
            seed=data.get("seed"),
            pacing=bool(data.get("pacing", False)),
        )

    @classmethod
    def from_yaml(cls, path: Path | str) -> "GameConfig":
        """Load the `game:` mapping of a YAML file."""
        path = Path(path)
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data.get("game", {}) or {})

    @classmethod
    def from_env(cls, base: Optional["GameConfig"] = None) -> "GameConfig":
        """Apply SKIRMISH_* environment overrides on top of `base`."""
        base = base or cls()
        overrides = {}

        int_fields = {
            "SKIRMISH_PLAYERS": "players",
            "SKIRMISH_STARTING_MONEY": "starting_money",
            "SKIRMISH_INCOME": "income_per_turn",
            "SKIRMISH_ACTIONS": "actions_per_turn",
            "SKIRMISH_TURN_LIMIT": "turn_limit",
            "SKIRMISH_SEED": "seed",
        }
        for var, attr in int_fields.items():
            value = os.getenv(var)
            if value:
                overrides[attr] = int(value)

        pacing = os.getenv("SKIRMISH_PACING")
        if pacing:
            overrides["pacing"] = pacing.strip().lower() in ("1", "true", "yes", "on")

        bots = os.getenv("SKIRMISH_BOTS")
        if bots:
            overrides["bot_difficulties"] = parse_difficulties(bots)

        if overrides:
            logger.info(f"Config overrides from environment: {sorted(overrides)}")
        return replace(base, **overrides)
