from pathlib import Path

import pytest

from lsd.config import (
    ColorConfig,
    Config,
    ConfigError,
    IconsConfig,
    RecursionConfig,
    SortingConfig,
    TruncateOwnerConfig,
    config_paths,
    expand_home,
)


@pytest.fixture
def fake_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setenv("APPDATA", str(tmp_path / "appdata"))
    return home


def test_read_default():
    expected = Config(
        classic=False,
        blocks=["permission", "user", "group", "size", "date", "name"],
        color=ColorConfig(when="auto", theme="default"),
        date=None,
        dereference=False,
        display=None,
        icons=IconsConfig(when="auto", theme="fancy", separator=" "),
        ignore_globs=None,
        indicators=False,
        layout="grid",
        recursion=RecursionConfig(enabled=False, depth=None),
        size="default",
        permission=None,
        sorting=SortingConfig(column="name", reverse=False, dir_grouping="none"),
        no_symlink=False,
        total_size=False,
        symlink_arrow="\u21d2",
        hyperlink="never",
        header=None,
        literal=False,
        truncate_owner=TruncateOwnerConfig(after=None, marker=""),
    )
    assert Config.builtin() == expected


def test_read_config_ok():
    assert Config.from_yaml("classic: true").classic is True


def test_read_config_bad_bool():
    with pytest.raises(ConfigError):
        Config.from_yaml("classic: notbool")


def test_read_config_file_not_found(capsys):
    assert Config.from_file("not-existed") is None
    assert capsys.readouterr().err == ""


def test_read_bad_display():
    with pytest.raises(ConfigError):
        Config.from_yaml("display: bad")


def test_unknown_top_level_field_rejected():
    with pytest.raises(ConfigError, match="unknown field"):
        Config.from_yaml("colour: always")


def test_unknown_nested_field_ignored():
    config = Config.from_yaml("color:\n  when: always\n  extra: 1\n")
    assert config.color == ColorConfig(when="always", theme=None)


def test_empty_document_is_all_none():
    assert Config.from_yaml("") == Config()


def test_negative_depth_rejected():
    with pytest.raises(ConfigError):
        Config.from_yaml("recursion:\n  depth: -1\n")


def test_custom_theme_name_accepted():
    assert Config.from_yaml("color:\n  theme: mytheme\n").color.theme == "mytheme"


def test_sorting_kebab_case():
    config = Config.from_yaml("sorting:\n  dir-grouping: first\n  column: size\n")
    assert config.sorting == SortingConfig(column="size", reverse=None, dir_grouping="first")


def test_from_file_format_error(tmp_path, capsys):
    path = tmp_path / "config.yaml"
    path.write_text("classic: notbool\n", encoding="utf-8")
    assert Config.from_file(path) is None
    assert "format error" in capsys.readouterr().err


def test_from_file_unreadable(tmp_path, capsys):
    assert Config.from_file(tmp_path) is None
    assert "Can not open config file" in capsys.readouterr().err


def test_from_file_ok(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("layout: tree\nheader: true\n", encoding="utf-8")
    config = Config.from_file(path)
    assert config.layout == "tree"
    assert config.header is True


def test_expand_home_without_tilde():
    assert expand_home("some/path") == Path("some/path")


def test_expand_home_tilde_alone(fake_home):
    assert expand_home("~") == fake_home


def test_expand_home_tilde_prefix(fake_home):
    assert expand_home("~/a/b") == fake_home / "a" / "b"


def test_expand_home_tilde_inside_name_untouched():
    assert expand_home("~user/x") == Path("~user/x")


def test_config_paths_first_is_dot_config(fake_home):
    paths = list(config_paths())
    assert paths[0] == fake_home / ".config" / "lsd"
    assert all(path.name == "lsd" for path in paths)


def test_load_default_uses_file(fake_home):
    directory = fake_home / ".config" / "lsd"
    directory.mkdir(parents=True)
    (directory / "config.yml").write_text("classic: true\n", encoding="utf-8")
    assert Config.load_default() == Config(classic=True)


def test_load_default_falls_back_to_builtin(fake_home):
    assert Config.load_default() == Config.builtin()


def test_load_default_skips_bad_file(fake_home, capsys):
    directory = fake_home / ".config" / "lsd"
    directory.mkdir(parents=True)
    (directory / "config.yaml").write_text("display: bad\n", encoding="utf-8")
    assert Config.load_default() == Config.builtin()
    assert "format error" in capsys.readouterr().err