import pytest

import undercroft.__main__ as main_module
from undercroft import config as config_module


@pytest.fixture()
def no_user_config(tmp_path, monkeypatch):
    monkeypatch.delenv(config_module.CONFIG_ENV_VAR, raising=False)
    monkeypatch.setattr(config_module, "user_config_path", lambda: tmp_path / "missing.yaml")


def test_main_builds_seeded_session(no_user_config, monkeypatch):
    captured = []
    monkeypatch.setattr(main_module, "run_console", lambda session: captured.append(session) or 0)
    assert main_module.main(["--seed", "5"]) == 0
    (session,) = captured
    assert session.config.seed == 5
    assert session.depth == 1


def test_main_reads_config_file(no_user_config, monkeypatch, tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text("player_max_hp: 42\n", encoding="utf-8")
    captured = []
    monkeypatch.setattr(main_module, "run_console", lambda session: captured.append(session) or 0)
    main_module.main(["--config", str(path), "-v"])
    assert captured[0].player.fighter.max_hp == 42


def test_version_flag_exits(capsys):
    with pytest.raises(SystemExit):
        main_module.main(["--version"])
    assert "undercroft" in capsys.readouterr().out


def test_negative_seed_is_reported_as_usage_error(no_user_config, monkeypatch, capsys):
    monkeypatch.setattr(main_module, "run_console", lambda session: 0)
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["--seed", "-1"])
    assert excinfo.value.code == 2
    assert "seed must be a non-negative integer" in capsys.readouterr().err
