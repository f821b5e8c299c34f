from skirmish import Phase, TurnManager
from skirmish.capture import advance_capture
from skirmish.turn import REASON_HQ, REASON_SCORE

from tests.helpers import make_game, make_state, pass_round, place


def test_end_turn_hands_over_and_pays_the_ending_faction(state):
    turns = TurnManager(state)
    state.turn.action_points = 1

    turns.end_turn()

    assert state.current_faction == 2
    assert state.turn.turn == 1
    assert state.turn.action_points == 5
    assert state.treasury.balance(1) == 2500
    assert state.treasury.balance(2) == 2000
    assert state.events.last("income").faction == 1


def test_round_wraps_and_increments_turn():
    state = make_state(players=3)
    turns = TurnManager(state)
    for expected in (2, 3, 1):
        turns.end_turn()
        assert state.current_faction == expected
    assert state.turn.turn == 2


def test_only_the_ending_faction_is_refreshed(state):
    mine = place(state, "infantry", 1, 0, 0)
    theirs = place(state, "infantry", 2, 5, 5)
    mine.has_moved = theirs.has_moved = True

    TurnManager(state).end_turn()

    assert not mine.has_moved
    assert theirs.has_moved


def test_selection_cleared_on_end_turn():
    state, processor = make_game()
    place(state, "infantry", 1, 0, 0)
    processor.select_unit(1, 0, 0)
    processor.end_turn(1)
    assert state.turn.selection.is_empty


def test_hq_victory():
    state = make_state(["H..H"])
    turns = TurnManager(state)
    state.board.set_owner(0, 0, 1)
    assert turns.check_victory() is None

    state.board.set_owner(3, 0, 1)
    result = turns.check_victory()

    assert result.winning_faction == 1
    assert result.reason == REASON_HQ
    assert state.turn.phase == Phase.GAME_OVER
    assert state.events.last("victory").data["reason"] == REASON_HQ


def test_no_hq_victory_on_a_board_without_headquarters():
    state = make_state(["c..."])
    state.board.set_owner(0, 0, 1)
    assert TurnManager(state).check_victory() is None
    assert not state.is_over


def test_turn_limit_victory_goes_to_best_score():
    state, processor = make_game(turn_limit=1)
    place(state, "infantry", 1, 0, 0)

    processor.end_turn(1)
    assert not state.is_over
    processor.end_turn(2)

    assert state.is_over
    assert state.winner.winning_faction == 1
    assert state.winner.reason == REASON_SCORE
    assert state.winner.scores == {1: 35, 2: 25}


def test_score_tie_goes_to_lowest_faction():
    state, processor = make_game(players=3, turn_limit=1)
    place(state, "infantry", 2, 0, 0)
    place(state, "infantry", 3, 5, 5)

    pass_round(processor)

    assert state.winner.winning_faction == 2
    assert state.winner.scores[2] == state.winner.scores[3]


def test_commands_rejected_after_game_over():
    state, processor = make_game(["H..H"])
    state.board.set_owner(0, 0, 1)
    state.board.set_owner(3, 0, 1)
    place(state, "infantry", 1, 1, 0)
    processor.end_turn(1)
    assert state.is_over

    for result in (
        processor.select_unit(state.current_faction, 1, 0),
        processor.end_turn(state.current_faction),
    ):
        assert not result.success
        assert result.error == "InvalidSelection"


def test_callbacks_fire(state):
    turns = TurnManager(state)
    seen = []
    turns.on_turn_end = lambda turn: seen.append(("end", turn.current_faction))
    turns.on_turn_start = lambda turn: seen.append(("start", turn.current_faction))
    turns.end_turn()
    assert seen == [("end", 1), ("start", 2)]


def test_snapshot_hides_submerged_enemies():
    state = make_state(["~~~~"])
    turns = TurnManager(state)
    place(state, "battleship", 1, 0, 0)
    sub = place(state, "submarine", 2, 3, 0)
    sub.submerged = True

    def unit_ids(viewer):
        return {u["id"] for u in turns.get_snapshot(viewer)["units"]}

    assert sub.id not in unit_ids(1)
    assert sub.id in unit_ids(2)
    assert sub.id in unit_ids(None)

    snapshot = turns.get_snapshot(1)
    assert snapshot["current_faction"] == 1
    assert snapshot["phase"] == "playing"
    assert snapshot["money"] == {1: 2000, 2: 2000}
    assert snapshot["winner"] is None


def test_turn_limit_ten_with_faction_one_ahead():
    state, processor = make_game(["Hc....H."], turn_limit=10)
    state.board.set_owner(0, 0, 1)
    state.board.set_owner(1, 0, 1)
    state.board.set_owner(6, 0, 2)

    for _ in range(9):
        pass_round(processor)
        assert not state.is_over

    pass_round(processor)

    assert state.turn.turn == 11
    assert state.winner.winning_faction == 1
    assert state.winner.reason == REASON_SCORE
    # HQ 100 + city 20 + $7000 / 100
    assert state.winner.scores == {1: 190, 2: 170}


def test_snapshot_reports_capture_state():
    state = make_state(["c..."])
    turns = TurnManager(state)
    infantry = place(state, "infantry", 1, 0, 0)
    assert turns.get_snapshot()["units"][0]["capture_state"] == "idle"

    advance_capture(state, infantry)
    unit = turns.get_snapshot()["units"][0]
    assert unit["capture_state"] == "capturing"
    assert unit["capture_progress"] == 1
