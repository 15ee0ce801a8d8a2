from undercroft.config import GameConfig
from undercroft.session import WELCOME_TEXT, GameEvent, GameSession


def test_fresh_session_sheet(session):
    sheet = session.character_sheet()
    assert sheet.level == 1
    assert sheet.xp == 0
    assert sheet.threshold == 350
    assert sheet.xp_to_next == 350
    assert (sheet.hp, sheet.max_hp) == (100, 100)
    assert (sheet.power, sheet.defense) == (4, 1)
    assert sheet.depth == 1


def test_welcome_and_initial_view(session):
    assert session.log.texts()[0] == WELCOME_TEXT
    assert session.visibility.in_fov(*session.player.pos)
    assert session.store[0] is session.player
    assert not session.game_over


def test_listeners_receive_payload(session):
    seen = []
    session.add_listener(lambda event, s, payload: seen.append((event, s, payload)))
    session.emit(GameEvent.LEVEL_UP, 2)
    assert seen == [(GameEvent.LEVEL_UP, session, 2)]


def test_sessions_do_not_share_state():
    a = GameSession(GameConfig(seed=3))
    b = GameSession(GameConfig(seed=3))
    a.player.fighter.xp = 100
    a.inventory.append(a.player)
    assert b.player.fighter.xp == 0
    assert b.inventory == []
    assert a.map.to_str_lines() == b.map.to_str_lines()
