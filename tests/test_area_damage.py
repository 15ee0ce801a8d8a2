import pytest

from conftest import make_monster
from undercroft.combat import area_damage
from undercroft.messages import MessageLog
from undercroft.world.entity import Fighter, make_player
from undercroft.world.store import EntityStore


@pytest.fixture()
def store():
    return EntityStore(make_player(1, 1, max_hp=30, power=5, defense=1))


def test_burst_credits_sum_of_kills_once(store):
    log = MessageLog()
    a = make_monster(store, 2, 1, name="orc", hp=10, xp_yield=35)
    b = make_monster(store, 1, 2, name="orc", hp=10, xp_yield=35)

    report = area_damage(store, (1, 1), 1, 25, log)

    assert sorted(eid for eid, _ in report.kills) == sorted([a.eid, b.eid])
    assert report.total_xp == 70
    assert store.player.fighter.xp == 70
    assert store.player.fighter.hp == 5
    assert report.player_killed is False
    assert not a.alive and not b.alive


def test_player_never_earns_its_own_yield(store):
    log = MessageLog()
    store.player.fighter = Fighter(max_hp=30, power=5, defense=1, xp_yield=50, hp=10)
    make_monster(store, 2, 1, name="orc", hp=10, xp_yield=35)
    make_monster(store, 1, 2, name="orc", hp=10, xp_yield=35)

    report = area_damage(store, (1, 1), 1, 25, log)

    assert report.player_killed is True
    assert store.player.eid not in [eid for eid, _ in report.kills]
    assert store.player.fighter.xp == 70
    assert not store.player.alive
    assert "You died!" in log.texts()


def test_burst_uses_euclidean_radius(store):
    log = MessageLog()
    diagonal = make_monster(store, 2, 2, hp=10)
    report = area_damage(store, (1, 1), 1, 25, log)
    assert diagonal.eid not in report.hit
    assert diagonal.alive


def test_survivors_are_hit_but_not_credited(store):
    log = MessageLog()
    tough = make_monster(store, 3, 1, name="troll", hp=100, xp_yield=100)
    report = area_damage(store, (3, 1), 0, 25, log)
    assert report.hit == [tough.eid]
    assert report.kills == []
    assert tough.fighter.hp == 75
    assert store.player.fighter.xp == 0


def test_corpses_are_not_hit_again(store):
    log = MessageLog()
    make_monster(store, 4, 4, name="orc", hp=10, xp_yield=35)
    first = area_damage(store, (4, 4), 1, 25, log)
    second = area_damage(store, (4, 4), 1, 25, log)
    assert first.total_xp == 35
    assert second.hit == []
    assert second.total_xp == 0
    assert store.player.fighter.xp == 35


def test_negative_radius_is_rejected(store):
    with pytest.raises(ValueError):
        area_damage(store, (1, 1), -1, 10, MessageLog())
