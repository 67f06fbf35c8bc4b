import os
from dataclasses import dataclass

import pytest

from lsd.cli import parse_args
from lsd.flags import Configurable

ENV_NAME = "LSD_TEST_DEPTH"


@dataclass(frozen=True)
class Depth(Configurable):
    value: int = 1

    @classmethod
    def from_cli(cls, cli):
        return None if cli.depth is None else cls(cli.depth)

    @classmethod
    def from_environment(cls):
        raw = os.environ.get(ENV_NAME)
        return None if raw is None else cls(int(raw))

    @classmethod
    def from_config(cls, config):
        depth = config.get("depth")
        return None if depth is None else cls(depth)


@dataclass(frozen=True)
class Marker(Configurable):
    text: str = ""

    @classmethod
    def from_cli(cls, cli):
        marker = cli.truncate_owner_marker
        return None if marker is None else cls(marker)

    @classmethod
    def from_config(cls, config):
        return None

    @classmethod
    def default(cls):
        return cls("...")


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    monkeypatch.delenv(ENV_NAME, raising=False)


def test_cli_value_wins(monkeypatch):
    monkeypatch.setenv(ENV_NAME, "4")
    cli = parse_args(["--depth", "2"])
    assert Depth.configure_from(cli, {"depth": 9}) == Depth(2)


def test_environment_beats_config(monkeypatch):
    monkeypatch.setenv(ENV_NAME, "4")
    assert Depth.configure_from(parse_args([]), {"depth": 9}) == Depth(4)


def test_config_used_when_nothing_else():
    assert Depth.configure_from(parse_args([]), {"depth": 9}) == Depth(9)


def test_default_when_no_source():
    assert Depth.configure_from(parse_args([]), {}) == Depth()


def test_overridden_default():
    assert Marker.configure_from(parse_args([]), {}) == Marker("...")
    cli = parse_args(["--truncate-owner-marker", "~"])
    assert Marker.configure_from(cli, {}) == Marker("~")


def test_environment_default_is_none(monkeypatch):
    monkeypatch.setenv(ENV_NAME, "4")
    assert Configurable.from_environment() is None
    # Marker keeps the inherited lookup, so the environment never decides.
    assert Marker.configure_from(parse_args([]), {}) == Marker("...")


def test_later_sources_not_consulted_when_cli_given():
    calls = []

    class Recording(Depth):
        @classmethod
        def from_config(cls, config):
            calls.append(config)
            return super().from_config(config)

    cli = parse_args(["--depth", "5"])
    assert Recording.configure_from(cli, {"depth": 9}) == Recording(5)
    assert calls == []


def test_incomplete_subclass_cannot_be_built():
    class Incomplete(Configurable):
        @classmethod
        def from_cli(cls, cli):
            return None

    with pytest.raises(TypeError):
        Configurable()
    with pytest.raises(TypeError):
        Incomplete()