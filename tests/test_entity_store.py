import pytest

from conftest import make_monster
from undercroft.errors import InvariantViolation
from undercroft.world.entity import PLAYER_ID, Entity, EntityKind, Fighter, make_player
from undercroft.world.store import PLAYER_SLOT, EntityStore


def _player():
    return make_player(1, 1, max_hp=30, power=3, defense=1)


def test_store_is_seeded_with_player_in_slot_zero():
    player = _player()
    store = EntityStore(player)
    assert len(store) == 1
    assert store[PLAYER_SLOT] is player
    assert store.player is player
    assert store.is_player(PLAYER_ID)


def test_store_rejects_non_player_seed_and_second_player():
    orc = Entity(eid=5, name="orc", x=0, y=0, glyph="o")
    with pytest.raises(InvariantViolation):
        EntityStore(orc)
    store = EntityStore(_player())
    with pytest.raises(InvariantViolation):
        store.add(_player())


def test_new_ids_are_unique_and_survive_reseeding():
    store = EntityStore(_player())
    a = make_monster(store, 2, 2)
    b = make_monster(store, 3, 3)
    assert a.eid != b.eid
    fresh = store.reseeded()
    c = make_monster(fresh, 4, 4)
    assert c.eid not in {PLAYER_ID, a.eid, b.eid}


def test_reseeded_keeps_only_the_same_player():
    player = _player()
    store = EntityStore(player)
    make_monster(store, 2, 2)
    make_monster(store, 3, 3)
    fresh = store.reseeded()
    assert len(fresh) == 1
    assert fresh.player is player
    # The old store is left untouched; it is simply dropped by its owner.
    assert len(store) == 3


def test_extract_player_fails_loudly_when_slot_zero_is_corrupted():
    store = EntityStore(_player())
    intruder = make_monster(store, 2, 2)
    store._entities.insert(0, intruder)
    with pytest.raises(InvariantViolation):
        store.extract_player()
    with pytest.raises(InvariantViolation):
        store.reseeded()


def test_queries_by_position():
    store = EntityStore(_player())
    rat = make_monster(store, 4, 4)
    potion = store.add(Entity(eid=store.new_id(), name="potion", x=4, y=4, glyph="!", kind=EntityKind.ITEM))
    assert store.blocking_at(4, 4) is rat
    assert set(e.eid for e in store.at(4, 4)) == {rat.eid, potion.eid}
    assert store.get(rat.eid) is rat
    assert store.get(999) is None
    assert store.blocking_at(9, 9) is None


def test_fighter_heal_is_saturating():
    f = Fighter(max_hp=20, power=1, defense=0, hp=15)
    assert f.heal(10) == 5
    assert f.hp == 20
    assert f.heal(3) == 0
    with pytest.raises(ValueError):
        f.heal(-1)


def test_fighter_validation():
    with pytest.raises(ValueError):
        Fighter(max_hp=0, power=1, defense=0)
    with pytest.raises(ValueError):
        Fighter(max_hp=5, power=1, defense=0, xp_yield=-1)


def test_xp_yield_is_fixed_at_creation():
    f = Fighter(max_hp=10, power=2, defense=0, xp_yield=35)
    assert f.xp_yield == 35
    with pytest.raises(AttributeError):
        f.xp_yield = 500
    assert f.take_damage(10) == 35
