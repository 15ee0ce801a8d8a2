from conftest import make_monster
from undercroft.combat import apply_damage, attack
from undercroft.messages import MessageLog
from undercroft.world.entity import Entity, EntityKind, make_player
from undercroft.world.store import EntityStore


def _store():
    return EntityStore(make_player(1, 1, max_hp=30, power=5, defense=1))


def test_apply_damage_returns_none_without_kill():
    store = _store()
    orc = make_monster(store, 2, 1, name="orc", hp=10, xp_yield=35)
    assert apply_damage(orc, 3) is None
    assert orc.fighter.hp == 7
    assert orc.alive


def test_kill_yields_once_and_flips_liveness():
    store = _store()
    orc = make_monster(store, 2, 1, name="orc", hp=10, xp_yield=35)
    assert apply_damage(orc, 10) == 35
    assert orc.fighter.alive is False
    assert apply_damage(orc, 10) is None


def test_damage_to_entity_without_fighter_is_not_a_kill():
    store = _store()
    stairs = store.add(Entity(eid=store.new_id(), name="stairs", x=3, y=3, glyph=">", kind=EntityKind.STAIRS))
    assert apply_damage(stairs, 50) is None


def test_player_attack_credits_exact_yield():
    store = _store()
    log = MessageLog()
    player = store.player
    orc = make_monster(store, 2, 1, name="orc", hp=4, defense=0, xp_yield=35)

    assert attack(player, orc, log) == 35
    assert player.fighter.xp == 35
    assert not orc.alive
    assert orc.glyph == "%"
    assert orc.blocks is False
    assert orc.kind is EntityKind.CORPSE
    assert orc in list(store)
    assert any("35 experience" in t for t in log.texts())


def test_second_hit_on_corpse_does_not_double_credit():
    store = _store()
    log = MessageLog()
    player = store.player
    orc = make_monster(store, 2, 1, name="orc", hp=4, xp_yield=35)
    attack(player, orc, log)
    assert attack(player, orc, log) is None
    assert player.fighter.xp == 35


def test_partial_damage_credits_nothing():
    store = _store()
    log = MessageLog()
    troll = make_monster(store, 2, 1, name="troll", hp=30, defense=2, xp_yield=100)
    assert attack(store.player, troll, log) is None
    assert store.player.fighter.xp == 0
    assert troll.fighter.hp == 27


def test_no_effect_when_defense_absorbs_everything():
    store = _store()
    log = MessageLog()
    golem = make_monster(store, 2, 1, name="golem", hp=30, defense=10, xp_yield=100)
    assert attack(store.player, golem, log) is None
    assert golem.fighter.hp == 30
    assert "no effect" in log.texts()[-1]


def test_monster_attacker_is_credited_too():
    store = _store()
    log = MessageLog()
    troll = make_monster(store, 2, 1, name="troll", hp=30, power=50, xp_yield=100)
    rat = make_monster(store, 3, 1, name="rat", hp=5, xp_yield=10)
    assert attack(troll, rat, log) == 10
    assert troll.fighter.xp == 10
    assert store.player.fighter.xp == 0
    assert log.texts()[-1] == "The rat is dead!"


def test_player_death_keeps_player_in_slot_zero():
    store = _store()
    log = MessageLog()
    troll = make_monster(store, 2, 1, name="troll", hp=30, power=500, xp_yield=100)
    attack(troll, store.player, log)
    assert not store.player.alive
    assert store[0].is_player
    assert store.player.glyph == "%"
    assert "You died!" in log.texts()
