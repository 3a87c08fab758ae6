"""Unit tests for configuration."""

import pytest
from plumb.core.config import Config, DEFAULT_IDENTITY


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / 'plumb.ini'
    path.write_text("[user]\nname = File User\nemail = file@example.com\n\n[history]\nrecentlimit = 5\n")
    return path


@pytest.fixture
def global_file(tmp_path):
    path = tmp_path / 'global.ini'
    path.write_text("[user]\nname = Global User\n\n[core]\nloglevel = DEBUG\n")
    return path


def test_get_fallback(config):
    assert config.get('user', 'name') is None
    assert config.get('user', 'name', 'fallback') == 'fallback'


def test_explicit_file_overrides_global(config_file, global_file):
    config = Config(config_file, global_path=global_file)
    assert config.get('user', 'name') == 'File User'
    assert config.get('core', 'loglevel') == 'DEBUG'


def test_env_overrides_files(config_file, monkeypatch):
    monkeypatch.setenv('PLUMB_USER_NAME', 'Env User')
    config = Config(config_file, global_path=config_file.parent / 'missing')
    assert config.get('user', 'name') == 'Env User'


def test_get_int(config_file, tmp_path):
    config = Config(config_file, global_path=tmp_path / 'missing')
    assert config.get_int('history', 'recentlimit', 10) == 5
    assert config.get_int('history', 'other', 10) == 10

    config.set('history', 'recentlimit', 'lots')
    with pytest.raises(ValueError):
        config.get_int('history', 'recentlimit', 10)


def test_identity(config_file, tmp_path):
    config = Config(config_file, global_path=tmp_path / 'missing')
    assert config.identity() == 'File User <file@example.com>'


def test_identity_default(config):
    assert config.identity() == DEFAULT_IDENTITY


def test_set_and_save(tmp_path):
    path = tmp_path / 'new.ini'
    config = Config(path, global_path=tmp_path / 'missing')
    config.set('user', 'email', 'me@example.com', save=True)

    reloaded = Config(path, global_path=tmp_path / 'missing')
    assert reloaded.get('user', 'email') == 'me@example.com'


def test_set_save_without_path(config):
    with pytest.raises(ValueError):
        config.set('user', 'name', 'x', save=True)


def test_list_all(config_file, global_file):
    config = Config(config_file, global_path=global_file)
    values = config.list_all()
    assert values['user']['name'] == 'File User'
    assert values['core']['loglevel'] == 'DEBUG'
