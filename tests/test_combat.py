from skirmish import UnitKind
from skirmish.combat import AmbushCombat, DirectCombat, round_half_up

from tests.helpers import FixedRandom, make_state, place


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(4.5) == 5
    assert round_half_up(4.49) == 4
    assert round_half_up(-1.5) == -1


def test_damage_formula_on_plains():
    state = make_state(width=4, height=1)
    tank = place(state, "tank", 1, 0, 0)
    infantry = place(state, "infantry", 2, 1, 0)
    combat = DirectCombat(state.rng)

    assert combat.calculate_damage(infantry, infantry, 0) == 5
    assert combat.calculate_damage(tank, infantry, 0) == 8

    combat = DirectCombat(FixedRandom(roll=0.0))
    assert combat.calculate_damage(tank, infantry, 0) == 3
    # Never less than one point
    assert combat.calculate_damage(infantry, tank, 0) == 1


def test_damage_scales_with_attacker_health():
    state = make_state(width=4, height=1)
    tank = place(state, "tank", 1, 0, 0)
    infantry = place(state, "infantry", 2, 1, 0)
    tank.health = 50
    assert DirectCombat(state.rng).calculate_damage(tank, infantry, 0) == 3


def test_damage_capped_at_remaining_health():
    state = make_state(width=4, height=1)
    tank = place(state, "tank", 1, 0, 0)
    infantry = place(state, "infantry", 2, 1, 0)
    infantry.health = 2
    assert DirectCombat(state.rng).calculate_damage(tank, infantry, 0) == 2


def test_terrain_protects_defender():
    state = make_state([".c.."])
    tank = place(state, "tank", 1, 0, 0)
    infantry = place(state, "infantry", 2, 1, 0)

    report = DirectCombat(state.rng).resolve(state, tank, infantry)
    assert report.damage == 6
    assert infantry.health == 94


def test_survivor_strikes_back():
    state = make_state(width=4, height=1)
    tank = place(state, "tank", 1, 0, 0)
    infantry = place(state, "infantry", 2, 1, 0)

    report = DirectCombat(state.rng).resolve(state, tank, infantry)

    assert report.damage == 8
    assert report.countered
    assert report.counter_damage == 3
    assert infantry.health == 92
    assert tank.health == 97
    assert [e.kind for e in state.events.of_kind("attack")] == ["attack"]
    assert len(state.events.of_kind("counter_attack")) == 1


def test_destroyed_defender_does_not_strike_back():
    state = make_state(width=4, height=1)
    tank = place(state, "tank", 1, 0, 0)
    infantry = place(state, "infantry", 2, 1, 0)
    infantry.health = 5

    report = DirectCombat(state.rng).resolve(state, tank, infantry)

    assert report.defender_destroyed
    assert not report.countered
    assert tank.health == 100
    assert infantry not in state.units
    assert state.board.get_tile(1, 0).unit is None
    assert state.treasury.ledgers[1].assets_killed == 800
    assert state.treasury.ledgers[2].assets_lost == 800
    assert state.events.last("destroyed").data["unit"] == infantry.id


def test_counter_attack_can_destroy_attacker():
    state = make_state(width=4, height=1)
    tank = place(state, "tank", 1, 0, 0)
    infantry = place(state, "infantry", 2, 1, 0)
    tank.health = 2

    report = DirectCombat(state.rng).resolve(state, tank, infantry)

    assert report.countered
    assert report.attacker_destroyed
    assert tank not in state.units
    assert state.treasury.ledgers[2].assets_killed == 2500


def test_unarmed_defender_does_not_strike_back():
    state = make_state([".~.."])
    tank = place(state, "tank", 1, 0, 0)
    transport = place(state, "transport", 2, 1, 0)

    report = DirectCombat(state.rng).resolve(state, tank, transport)

    assert report.damage == 10
    assert not report.countered
    assert tank.health == 100


def test_cargo_goes_down_with_its_transport():
    state = make_state([".~.."])
    tank = place(state, "tank", 1, 0, 0)
    transport = place(state, "transport", 2, 1, 0)
    passenger = state.units.create(UnitKind.INFANTRY, 2)
    transport.cargo.append(passenger)
    transport.health = 1

    report = DirectCombat(state.rng).resolve(state, tank, transport)

    assert report.defender_destroyed
    assert transport.cargo == []
    assert state.treasury.ledgers[2].assets_lost == 3000 + 800
    assert state.treasury.ledgers[1].assets_killed == 3000 + 800
    assert state.events.last("destroyed").data["cargo"] == [passenger.id]


def test_ambush_is_one_sided():
    state = make_state(["~~~~"])
    battleship = place(state, "battleship", 1, 0, 0)
    submarine = place(state, "submarine", 2, 1, 0)
    submarine.submerged = True

    report = AmbushCombat(state.rng).resolve(state, submarine, battleship)

    assert report.kind == "ambush"
    assert report.damage == 5
    assert not report.countered
    assert not submarine.submerged
    assert battleship.health == 95
    assert submarine.health == 100
