"""Tests for the command line interface."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from sceneseq import __version__
from sceneseq.cli import app
from sceneseq.models import SceneSettings, Settings
from sceneseq.services import InMemorySceneGraph

runner = CliRunner()


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    path = tmp_path / "sequencer.yaml"
    Settings(
        only_active_scene=True,
        scenes={
            "Main": SceneSettings(
                enabled=True,
                sources_txt="A|1s\nB|1s",
                gap_hms="0.5s",
                cool_hms="2s",
                tick_hms="0",
            ),
            "Other": SceneSettings(),
        },
    ).to_yaml(path)
    return path


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_parse_prints_milliseconds_and_canonical_form() -> None:
    result = runner.invoke(app, ["parse", "90s", "1:30", "garbage"])
    assert result.exit_code == 0
    assert "90000 ms" in result.output
    assert "00:01:30.000" in result.output
    assert "0 ms" in result.output


def test_init_creates_defaults(tmp_path: Path) -> None:
    path = tmp_path / "new.yaml"
    result = runner.invoke(app, ["init", "Intro", "Game", "--settings", str(path)])
    assert result.exit_code == 0, result.output
    settings = Settings.from_yaml(path)
    assert list(settings.scenes) == ["Intro", "Game"]
    assert settings.scenes["Game"].gap_hms == "00:00:00.500"


def test_init_keeps_existing_scenes(settings_file: Path) -> None:
    result = runner.invoke(app, ["init", "Main", "Extra", "--settings", str(settings_file)])
    assert result.exit_code == 0, result.output
    assert "+ Extra" in result.output
    settings = Settings.from_yaml(settings_file)
    assert settings.scenes["Main"].enabled is True
    assert settings.scenes["Main"].cool_hms == "00:00:02.000"
    assert "Extra" in settings.scenes


def test_status(settings_file: Path) -> None:
    result = runner.invoke(app, ["status", "--settings", str(settings_file)])
    assert result.exit_code == 0, result.output
    assert "Active scene only: yes" in result.output
    assert "1. A  00:00:01.000" in result.output
    assert "(no sources)" in result.output


def test_status_without_settings(tmp_path: Path) -> None:
    result = runner.invoke(app, ["status", "--settings", str(tmp_path / "missing.yaml")])
    assert result.exit_code == 1
    assert "No settings found" in result.output


def test_add_appends_source(settings_file: Path) -> None:
    result = runner.invoke(app, ["add", "Main", "C", "--duration", "750ms", "--settings", str(settings_file)])
    assert result.exit_code == 0, result.output
    settings = Settings.from_yaml(settings_file)
    assert settings.scenes["Main"].sources_txt.splitlines()[-1] == "C|00:00:00.750"


def test_add_rejects_zero_duration(settings_file: Path) -> None:
    result = runner.invoke(app, ["add", "Main", "C", "--duration", "nope", "--settings", str(settings_file)])
    assert result.exit_code == 1
    settings = Settings.from_yaml(settings_file)
    assert "C|" not in settings.scenes["Main"].sources_txt


def test_clear(settings_file: Path) -> None:
    result = runner.invoke(app, ["clear", "Main", "--settings", str(settings_file)])
    assert result.exit_code == 0, result.output
    assert Settings.from_yaml(settings_file).scenes["Main"].sources_txt == ""


def test_clear_unknown_scene(settings_file: Path) -> None:
    result = runner.invoke(app, ["clear", "Nope", "--settings", str(settings_file)])
    assert result.exit_code == 1


def test_normalize(settings_file: Path) -> None:
    result = runner.invoke(app, ["normalize", "--settings", str(settings_file)])
    assert result.exit_code == 0, result.output
    main = Settings.from_yaml(settings_file).scenes["Main"]
    assert (main.gap_hms, main.cool_hms, main.tick_hms) == ("00:00:00.500", "00:00:02.000", "00:00:00.000")


def test_simulate_manual_start(settings_file: Path) -> None:
    result = runner.invoke(app, ["simulate", "--settings", str(settings_file), "--seconds", "5", "--trigger"])
    assert result.exit_code == 0, result.output
    lines = [line.strip() for line in result.output.splitlines()]
    assert "Manual start: Main" in lines
    assert "00:00:00.000  Main  ▶ A" in lines
    assert "00:00:01.000  Main  ■ A" in lines
    assert "00:00:01.500  Main  ▶ B" in lines
    assert "00:00:02.500  Main  ■ B" in lines
    assert "Main: idle" in lines


class FakeObsGraph(InMemorySceneGraph):
    """In-memory graph with the extra hooks the run command uses."""

    instances: list["FakeObsGraph"] = []

    def __init__(self, *args, **kwargs) -> None:
        super().__init__({"Main": ["A", "B"], "Other": []}, active_scene="Main")
        self.closed = False
        FakeObsGraph.instances.append(self)

    @property
    def address(self) -> str:
        return "fake:4455"

    def watch_scene_changes(self, on_change) -> None:
        pass

    def close(self) -> None:
        self.closed = True


def test_run_survives_a_failed_reload(settings_file: Path, monkeypatch) -> None:
    """A settings file that fails to load on reload keeps the sequencer running."""
    import sceneseq.services.obs as obs_module

    FakeObsGraph.instances.clear()
    monkeypatch.setattr(obs_module, "ObsSceneGraph", FakeObsGraph)

    original = Settings.from_yaml
    calls = {"n": 0}

    def flaky_from_yaml(cls, path):
        calls["n"] += 1
        if calls["n"] > 1:
            raise ValueError("bad yaml after edit")
        return original(path)

    monkeypatch.setattr(Settings, "from_yaml", classmethod(flaky_from_yaml))

    result = runner.invoke(
        app,
        ["run", "--settings", str(settings_file), "--heartbeat", "5"],
        input="reload\nbogus\nquit\n",
    )
    assert result.exit_code == 0, result.output
    assert "Reload failed, keeping current settings: bad yaml after edit" in result.output
    assert "Unknown command: bogus" in result.output
    assert FakeObsGraph.instances[0].closed
