"""Tests for persisted settings and sequence configs."""

from pathlib import Path

from sceneseq.models import SceneSettings, SequenceConfig, SequencePhase, Settings


def test_scene_defaults() -> None:
    scene = SceneSettings()
    assert scene.enabled is False
    assert scene.sources_txt == ""
    assert scene.add_hms == "00:00:06.000"
    assert scene.gap_hms == "00:00:00.500"
    assert scene.cool_hms == "00:00:04.000"
    assert scene.tick_hms == "00:00:30.000"
    assert scene.chance_pct == 20


def test_chance_is_clamped_not_rejected() -> None:
    assert SceneSettings(chance_pct=0).chance_pct == 1
    assert SceneSettings(chance_pct=250).chance_pct == 100
    assert SceneSettings(chance_pct="abc").chance_pct == 20


def test_normalize_rewrites_durations() -> None:
    scene = SceneSettings(gap_hms="1s", cool_hms="garbage", tick_hms="1m", add_hms="90s")
    durations = scene.normalize()
    assert durations == {"add_hms": 90_000, "gap_hms": 1000, "cool_hms": 0, "tick_hms": 60_000}
    assert scene.gap_hms == "00:00:01.000"
    assert scene.cool_hms == "00:00:00.000"
    assert scene.tick_hms == "00:01:00.000"
    assert scene.add_hms == "00:01:30.000"


def test_add_source_appends_canonical_line() -> None:
    scene = SceneSettings()
    assert scene.add_source("A") is True
    assert scene.add_source("B", "2s") is True
    assert scene.sources_txt == "A|00:00:06.000\nB|00:00:02.000"
    assert scene.add_hms == "00:00:02.000"


def test_add_source_ignores_empty_name_and_zero_duration() -> None:
    scene = SceneSettings()
    assert scene.add_source("", "") is False
    assert scene.add_source("A", "nothing") is False
    assert scene.sources_txt == ""


def test_clear_sources() -> None:
    scene = SceneSettings(sources_txt="A|1s")
    scene.clear_sources()
    assert scene.sources_txt == ""


def test_settings_yaml_roundtrip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "sequencer.yaml"
    settings = Settings(only_active_scene=False)
    settings.scene("Main").add_source("A", "1s")
    settings.to_yaml(path)

    loaded = Settings.from_yaml(path)
    assert loaded.only_active_scene is False
    assert loaded.scenes["Main"].sources_txt == "A|00:00:01.000"


def test_missing_or_empty_yaml_gives_defaults(tmp_path: Path) -> None:
    assert Settings.from_yaml(tmp_path / "nope.yaml") == Settings()
    empty = tmp_path / "empty.yaml"
    empty.write_text("")
    loaded = Settings.from_yaml(empty)
    assert loaded.only_active_scene is True
    assert loaded.scenes == {}


def test_null_fields_in_yaml(tmp_path: Path) -> None:
    path = tmp_path / "s.yaml"
    path.write_text("scenes:\n  Main:\n    sources_txt: null\n    enabled: true\n")
    loaded = Settings.from_yaml(path)
    assert loaded.scenes["Main"].sources_txt == ""


def test_sequence_config_from_settings_starts_idle() -> None:
    stored = SceneSettings(enabled=True, sources_txt="A|1s", gap_hms="250ms", tick_hms="10s", chance_pct=55)
    cfg = SequenceConfig.from_settings(stored, now=5000)

    assert cfg.enabled is True
    assert cfg.gap_ms == 250
    assert cfg.cooldown_ms == 4000
    assert cfg.tick_ms == 10_000
    assert cfg.chance_pct == 55
    assert cfg.phase == SequencePhase.IDLE
    assert cfg.index == 0
    assert cfg.next_random_check == 15_000
    # stored text self-normalizes
    assert stored.gap_hms == "00:00:00.250"


def test_zero_tick_checks_immediately() -> None:
    cfg = SequenceConfig.from_settings(SceneSettings(tick_hms="0"), now=700)
    assert cfg.tick_ms == 0
    assert cfg.next_random_check == 700
