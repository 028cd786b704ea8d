import json

import pytest

from mentalpoker.config import MentalPokerConfig, StoreConfig


def test_defaults_validate():
    cfg = MentalPokerConfig()
    cfg.validate()
    assert cfg.store.scheme == "memory"
    assert json.loads(cfg.to_json())["max_vector_len"] == cfg.max_vector_len


def test_from_env(monkeypatch):
    monkeypatch.setenv("MENTALPOKER_MAX_VECTOR_LEN", "1024")
    monkeypatch.setenv("MENTALPOKER_CHECK_SUBGROUP", "false")
    monkeypatch.setenv("MENTALPOKER_STORE_URI", "sqlite:///tmp/mp.db")
    cfg = MentalPokerConfig.from_env()
    assert cfg.max_vector_len == 1024
    assert cfg.check_subgroup is False
    assert cfg.store.path == "/tmp/mp.db"


def test_from_env_rejects_garbage(monkeypatch):
    monkeypatch.setenv("MENTALPOKER_MAX_VECTOR_LEN", "lots")
    with pytest.raises(ValueError):
        MentalPokerConfig.from_env()


def test_from_json_and_yaml(tmp_path):
    j = tmp_path / "cfg.json"
    j.write_text(json.dumps({"max_vector_len": 52, "store": {"uri": "memory://"}}))
    assert MentalPokerConfig.from_file(str(j)).max_vector_len == 52

    y = tmp_path / "cfg.yaml"
    y.write_text("check_subgroup: false\nstore:\n  uri: sqlite:///var/tmp/s.db\n  sqlite_timeout_s: 5\n")
    cfg = MentalPokerConfig.from_file(str(y))
    assert cfg.check_subgroup is False
    assert cfg.store.sqlite_timeout_s == 5


def test_from_file_requires_mapping(tmp_path):
    p = tmp_path / "cfg.yaml"
    p.write_text("- 1\n- 2\n")
    with pytest.raises(ValueError):
        MentalPokerConfig.from_file(str(p))


@pytest.mark.parametrize(
    "cfg",
    [
        MentalPokerConfig(max_vector_len=0),
        MentalPokerConfig(max_vector_len=1 << 33),
        MentalPokerConfig(store=StoreConfig(uri="memory")),
        MentalPokerConfig(store=StoreConfig(uri="ftp://x")),
        MentalPokerConfig(store=StoreConfig(uri="sqlite://")),
        MentalPokerConfig(store=StoreConfig(sqlite_timeout_s=0)),
    ],
)
def test_validation_errors(cfg):
    with pytest.raises(ValueError):
        cfg.validate()
