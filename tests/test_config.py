"""Tests for configuration handling"""
import json

import pytest

from twig.config import (
    Config,
    SimpleEditor,
    StructuredEditor,
    detect_smart_default,
    get_global_config_path,
    load_config_file,
    load_editor_config,
    parse_editor_config,
)


@pytest.fixture
def xdg_home(temp_dir, monkeypatch):
    """Point the global config lookup at a temporary directory."""
    config_home = temp_dir / "xdg"
    monkeypatch.setattr("sys.platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home


def write_json(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))


class TestConfig:
    """Test the runtime Config dataclass."""

    def test_defaults(self):
        config = Config()
        assert config.assume_yes is False
        assert config.copy_untracked is True
        assert config.bulk_copy_threshold == 10
        assert config.workers is None
        assert config.default_branch_candidates == ["main", "master"]
        assert config.install_hook is True

    @pytest.mark.parametrize("value", [0, -5])
    def test_invalid_threshold(self, value):
        with pytest.raises(ValueError, match="bulk_copy_threshold"):
            Config(bulk_copy_threshold=value)

    def test_invalid_workers(self):
        with pytest.raises(ValueError, match="workers"):
            Config(workers=0)

    def test_empty_candidates(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            Config(default_branch_candidates=["", "  "])

    def test_candidates_are_stripped(self):
        assert Config(default_branch_candidates=[" trunk ", "main"]).default_branch_candidates == ["trunk", "main"]

    def test_from_dict_ignores_unknown_keys(self):
        config = Config.from_dict({"assume_yes": True, "stale_days": 30})
        assert config.assume_yes is True
        assert not hasattr(config, "stale_days")

    def test_to_dict_round_trip(self):
        config = Config(verbose=True, workers=4)
        assert Config.from_dict(config.to_dict()) == config


class TestGlobalConfigPath:
    """Test platform-specific global config location."""

    def test_xdg_config_home(self, xdg_home):
        assert get_global_config_path() == xdg_home / "twig" / "config.json"

    def test_default_dot_config(self, temp_dir, monkeypatch):
        monkeypatch.setattr("sys.platform", "linux")
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setenv("HOME", str(temp_dir))
        assert get_global_config_path() == temp_dir / ".config" / "twig" / "config.json"

    def test_windows_appdata(self, temp_dir, monkeypatch):
        monkeypatch.setattr("sys.platform", "win32")
        monkeypatch.setenv("APPDATA", str(temp_dir))
        assert get_global_config_path() == temp_dir / "twig" / "config.json"


class TestLoadConfigFile:
    """Test JSON config file loading."""

    def test_missing_file(self, temp_dir):
        assert load_config_file(temp_dir / "nope.json") is None

    def test_valid_file(self, temp_dir):
        path = temp_dir / "config.json"
        write_json(path, {"editor": "vim"})
        assert load_config_file(path) == {"editor": "vim"}

    def test_malformed_json_warns(self, temp_dir, caplog):
        path = temp_dir / "config.json"
        path.write_text("{not json")
        assert load_config_file(path) is None
        assert "Malformed JSON" in caplog.text

    def test_non_object_warns(self, temp_dir, caplog):
        path = temp_dir / "config.json"
        write_json(path, ["cursor"])
        assert load_config_file(path) is None
        assert "must be a JSON object" in caplog.text


class TestParseEditorConfig:
    """Test editor value parsing."""

    def test_string(self):
        editor = parse_editor_config("cursor", "test")
        assert editor == SimpleEditor("cursor")
        assert editor.resolve() == ("cursor", ["."])

    def test_structured_with_args(self):
        editor = parse_editor_config({"command": "code", "args": ["--new-window", "."]}, "test")
        assert editor == StructuredEditor("code", ("--new-window", "."))
        assert editor.resolve() == ("code", ["--new-window", "."])

    def test_structured_without_args_defaults_to_dot(self):
        editor = parse_editor_config({"command": "nvim"}, "test")
        assert editor.resolve() == ("nvim", ["."])

    @pytest.mark.parametrize(
        "value,message",
        [
            ({"args": ["."]}, "'command' must be a string"),
            ({"command": "code", "args": "."}, "'args' must be an array"),
            ({"command": "code", "args": [1]}, "all 'args' elements must be strings"),
            (42, "must be a string or object"),
        ],
    )
    def test_invalid_values_warn(self, value, message, caplog):
        assert parse_editor_config(value, "test") is None
        assert message in caplog.text


class TestLoadEditorConfig:
    """Test editor config precedence."""

    def test_project_file_wins(self, temp_dir, xdg_home):
        project = temp_dir / "project"
        write_json(project / ".twig", {"editor": "vim"})
        write_json(xdg_home / "twig" / "config.json", {"editor": "code"})
        (project / ".cursor").mkdir()
        assert load_editor_config(project) == SimpleEditor("vim")

    def test_global_file_used_without_project_file(self, temp_dir, xdg_home):
        project = temp_dir / "project"
        project.mkdir()
        write_json(xdg_home / "twig" / "config.json", {"editor": {"command": "zed"}})
        assert load_editor_config(project) == StructuredEditor("zed")

    def test_invalid_project_editor_falls_through(self, temp_dir, xdg_home):
        project = temp_dir / "project"
        write_json(project / ".twig", {"editor": 5})
        write_json(xdg_home / "twig" / "config.json", {"editor": "code"})
        assert load_editor_config(project) == SimpleEditor("code")

    @pytest.mark.parametrize("marker,command", [(".cursor", "cursor"), (".vscode", "code"), (".claude", "claude")])
    def test_smart_default(self, temp_dir, xdg_home, marker, command):
        project = temp_dir / "project"
        (project / marker).mkdir(parents=True)
        assert detect_smart_default(project) == command
        assert load_editor_config(project) == SimpleEditor(command)

    def test_nothing_configured(self, temp_dir, xdg_home):
        project = temp_dir / "project"
        project.mkdir()
        assert load_editor_config(project) is None
