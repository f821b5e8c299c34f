from commanders import AttackAction, BuildAction, CaptureAction, MoveAction, Planner
from commanders.doctrine import DifficultyPolicy, cheapest_first

from tests.helpers import FixedRandom, make_state, place


def make_planner(skip_probability=0.0, preference=cheapest_first, chance=0.99):
    policy = DifficultyPolicy("test", 0.0, skip_probability, preference)
    return Planner(policy, FixedRandom(chance=chance))


def test_attacks_an_adjacent_enemy_first():
    state = make_state()
    tank = place(state, "tank", 1, 0, 0)
    place(state, "infantry", 2, 1, 0)

    actions = make_planner().plan(state, 1)

    assert actions[0] == AttackAction(unit_id=tank.id, target=(1, 0))


def test_hidden_submarines_are_ignored():
    state = make_state(["~~~~"])
    place(state, "battleship", 1, 0, 0)
    sub = place(state, "submarine", 2, 1, 0)
    sub.submerged = True

    assert make_planner().plan(state, 1) == []


def test_captures_in_place():
    state = make_state(["c..."])
    infantry = place(state, "infantry", 1, 0, 0)
    assert make_planner().plan(state, 1) == [CaptureAction(unit_id=infantry.id)]


def test_moves_toward_the_nearest_capturable_structure():
    state = make_state(["......c."])
    infantry = place(state, "infantry", 1, 0, 0)

    actions = make_planner().plan(state, 1)

    assert actions == [MoveAction(unit_id=infantry.id, destination=(3, 0), purpose="capture")]


def test_advances_on_enemy_hq_then_builds():
    state = make_state(["H......H"])
    state.board.set_owner(0, 0, 1)
    state.board.set_owner(7, 0, 2)
    tank = place(state, "tank", 1, 1, 0)

    actions = make_planner().plan(state, 1)

    assert actions == [
        MoveAction(unit_id=tank.id, destination=(5, 0)),
        BuildAction(position=(0, 0), kind="infantry"),
    ]


def test_neutral_hq_is_an_advance_target():
    state = make_state(["H......."])
    tank = place(state, "tank", 1, 7, 0)
    assert make_planner().plan(state, 1) == [MoveAction(unit_id=tank.id, destination=(3, 0))]


def test_heads_for_the_centre_without_enemy_hq():
    state = make_state(width=9, height=1)
    tank = place(state, "tank", 1, 0, 0)
    assert make_planner().plan(state, 1) == [MoveAction(unit_id=tank.id, destination=(4, 0))]


def test_destinations_are_reserved():
    state = make_state([
        "H......H",
        "........",
    ])
    state.board.set_owner(0, 0, 1)
    state.board.set_owner(7, 0, 2)
    place(state, "tank", 1, 1, 0)
    place(state, "tank", 1, 1, 1)

    actions = make_planner().plan(state, 1)
    destinations = [a.destination for a in actions if isinstance(a, MoveAction)]

    assert len(destinations) == 2
    assert len(set(destinations)) == 2


def test_stays_put_when_no_move_gets_closer():
    state = make_state(["c..."])
    state.board.set_owner(0, 0, 1)
    place(state, "tank", 1, 2, 0)
    state.turn.action_points = 1
    # Tank already sits at the centre; the one action goes to the build pass
    assert make_planner().plan(state, 1) == [BuildAction(position=(0, 0), kind="infantry")]


def test_action_budget_limits_the_plan():
    state = make_state(actions_per_turn=1)
    place(state, "tank", 1, 0, 0)
    place(state, "infantry", 2, 1, 0)
    place(state, "tank", 1, 5, 5)
    place(state, "infantry", 2, 6, 5)
    assert len(make_planner().plan(state, 1)) == 1


def test_skipped_and_spent_units_do_nothing():
    state = make_state()
    spent = place(state, "tank", 1, 0, 0)
    place(state, "infantry", 2, 1, 0)
    spent.has_moved = True
    assert make_planner().plan(state, 1) == []

    spent.has_moved = False
    assert make_planner(skip_probability=1.0).plan(state, 1) == []


def test_build_pass_respects_money():
    state = make_state(["ccc."])
    for x in range(3):
        state.board.set_owner(x, 0, 1)

    actions = make_planner().plan(state, 1)

    assert actions == [
        BuildAction(position=(0, 0), kind="infantry"),
        BuildAction(position=(1, 0), kind="infantry"),
    ]


def test_ships_are_planned_at_sea_ports():
    state = make_state(["p~"], starting_money=5000)
    state.board.set_owner(0, 0, 1)
    assert make_planner().plan(state, 1) == [BuildAction(position=(0, 0), kind="transport")]


def test_action_descriptions():
    assert AttackAction("a", (1, 2)).description == "a attacks (1, 2)"
    assert MoveAction("a", (3, 4), "capture").description == "a moves to (3, 4) (capture)"
    assert BuildAction((0, 0), "tank").description == "builds tank at (0, 0)"
