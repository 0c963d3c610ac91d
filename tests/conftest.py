import pytest

import cla


@pytest.fixture(autouse=True)
def cla_home(tmp_path, monkeypatch):
    """Keep every test away from the real ~/.cla."""
    home = tmp_path / "home"
    monkeypatch.setenv(cla.CLA_HOME_ENV, str(home))
    monkeypatch.delenv(cla.CLA_CONFIG_ENV, raising=False)
    return home


@pytest.fixture
def data_path(tmp_path):
    return tmp_path / "data" / "commands.json"


@pytest.fixture
def store(data_path):
    return cla.CommandStore(data_path)


def make_config(data_path, **overrides):
    return cla.Config(data_file=str(data_path), **overrides)


def seed(store, *commands):
    store.save(cla.CommandList([cla.Entry(i, c) for i, c in enumerate(commands)]))
