import pytest

from skirmish import GameConfig
from skirmish.config import parse_difficulties

ENV_VARS = [
    "SKIRMISH_PLAYERS", "SKIRMISH_STARTING_MONEY", "SKIRMISH_INCOME", "SKIRMISH_ACTIONS",
    "SKIRMISH_TURN_LIMIT", "SKIRMISH_SEED", "SKIRMISH_PACING", "SKIRMISH_BOTS",
]


@pytest.fixture
def clean_env(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


def test_defaults():
    config = GameConfig()
    assert config.factions == [1, 2]
    assert config.starting_money == 2000
    assert config.income_per_turn == 500
    assert config.actions_per_turn == 5
    assert config.turn_limit is None
    assert config.difficulty_for(2) == "medium"


@pytest.mark.parametrize("kwargs", [
    {"players": 1},
    {"players": 5},
    {"actions_per_turn": 0},
    {"starting_money": -1},
    {"turn_limit": 0},
    {"bot_difficulties": {3: "easy"}},
    {"bot_difficulties": {2: "impossible"}},
])
def test_validation(kwargs):
    with pytest.raises(ValueError):
        GameConfig(**kwargs)


def test_parse_difficulties():
    assert parse_difficulties("2=hard, 3=Easy") == {2: "hard", 3: "easy"}
    assert parse_difficulties("") == {}
    with pytest.raises(ValueError):
        parse_difficulties("2hard")


def test_from_yaml(tmp_path):
    path = tmp_path / "match.yaml"
    path.write_text(
        "game:\n  players: 3\n  turn_limit: 12\n  bot_difficulties:\n    2: hard\n    3: Easy\n"
    )
    config = GameConfig.from_yaml(path)
    assert config.players == 3
    assert config.turn_limit == 12
    assert config.bot_difficulties == {2: "hard", 3: "easy"}
    assert config.difficulty_for(3) == "easy"


def test_from_env(clean_env):
    clean_env.setenv("SKIRMISH_PLAYERS", "3")
    clean_env.setenv("SKIRMISH_TURN_LIMIT", "12")
    clean_env.setenv("SKIRMISH_PACING", "yes")
    clean_env.setenv("SKIRMISH_BOTS", "2=hard,3=easy")

    config = GameConfig.from_env(GameConfig(starting_money=900))

    assert config.players == 3
    assert config.turn_limit == 12
    assert config.pacing
    assert config.bot_difficulties == {2: "hard", 3: "easy"}
    assert config.starting_money == 900


def test_from_env_without_overrides(clean_env):
    base = GameConfig(turn_limit=7)
    assert GameConfig.from_env(base) == base


def test_from_env_is_validated(clean_env):
    clean_env.setenv("SKIRMISH_PLAYERS", "9")
    with pytest.raises(ValueError):
        GameConfig.from_env()
