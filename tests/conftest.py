import pytest

from tests.helpers import make_game, make_state


@pytest.fixture
def state():
    """Empty 8x8 plains board, two factions, fixed dice."""
    return make_state()


@pytest.fixture
def game():
    return make_game()
