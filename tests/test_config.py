"""Tests für das Konfigurationssystem (Raster, Editor-Vorbelegung, YAML)."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from config.schema import (
    DayColumn,
    EditorDefaults,
    TimeGridConfig,
    TimeRow,
    TimetableConfig,
    is_valid_time,
)
from config.defaults import (
    SLOT_TYPE_COLORS,
    SLOT_TYPE_LABELS,
    afternoon_time_grid,
    default_day_columns,
    default_time_grid,
    default_time_rows,
    default_timetable_config,
)
from config.manager import ConfigManager


def _mgr(tmp_path: Path) -> ConfigManager:
    mgr = ConfigManager()
    mgr.CONFIG_DIR = tmp_path
    mgr.DEFAULT_CONFIG = tmp_path / "timetable_config.yaml"
    return mgr


# ─── DEFAULT-KONFIGURATION ────────────────────────────────────────────────────

class TestDefaultConfig:
    def test_default_time_grid_valid(self):
        """Default-Raster: 7 Tage, 06:00–22:00 in 30-Minuten-Zeilen."""
        tg = default_time_grid()
        assert len(tg.days) == 7
        assert len(tg.time_rows) == 32
        assert tg.time_rows[0].start_time == "06:00"
        assert tg.time_rows[0].end_time == "06:30"
        assert tg.time_rows[-1].start_time == "21:30"
        assert tg.time_rows[-1].end_time == "22:00"

    def test_days_start_monday(self):
        """Spalten folgen ISO: 0=Montag .. 6=Sonntag."""
        days = default_day_columns()
        assert [d.day_of_week for d in days] == [0, 1, 2, 3, 4, 5, 6]
        assert days[0].name == "Monday"
        assert days[0].short_name == "Mon"
        assert days[6].short_name == "Sun"

    def test_afternoon_grid(self):
        """Nachmittagsraster: Mo–Sa, vier Stunden-Zeilen."""
        tg = afternoon_time_grid()
        assert tg.day_indices == [0, 1, 2, 3, 4, 5]
        assert [r.start_time for r in tg.time_rows] == ["15:00", "16:00", "17:00", "18:00"]
        assert tg.time_choices() == ["15:00", "16:00", "17:00", "18:00", "19:00"]

    def test_time_rows_drop_partial_step(self):
        """Ein Rest kürzer als der Schritt wird nicht als Zeile angelegt."""
        rows = default_time_rows("15:00", "16:45", 30)
        assert [r.start_time for r in rows] == ["15:00", "15:30", "16:00"]

    def test_time_rows_invalid_step(self):
        with pytest.raises(ValueError):
            default_time_rows(step_minutes=0)

    def test_default_timetable_config(self):
        """Vollständige Default-Config ist valide."""
        config = default_timetable_config()
        assert config.business_name == "Kids Activity Club"
        assert config.storage.reject_coach_double_booking is True
        assert config.editor.day_of_week == 0
        assert config.editor.start_time == "15:00"
        assert config.editor.end_time == "16:00"

    def test_slot_type_tables_complete(self):
        """Für jeden Slot-Typ gibt es Beschriftung und Farbe."""
        assert set(SLOT_TYPE_LABELS) == {"121", "ASC", "GDS", "OBS", "AVAILABLE"}
        assert set(SLOT_TYPE_COLORS) == set(SLOT_TYPE_LABELS)
        assert SLOT_TYPE_LABELS["AVAILABLE"] == "Available"


# ─── SCHEMA-VALIDIERUNG ───────────────────────────────────────────────────────

class TestSchemaValidation:
    def test_is_valid_time(self):
        assert is_valid_time("00:00")
        assert is_valid_time("23:59")
        assert not is_valid_time("9:00")
        assert not is_valid_time("24:00")
        assert not is_valid_time("12:60")
        assert not is_valid_time("")

    def test_time_row_default_label(self):
        row = TimeRow(start_time="15:00", end_time="16:00")
        assert row.label == "15:00 - 16:00"

    def test_time_row_start_after_end_raises(self):
        with pytest.raises(ValidationError):
            TimeRow(start_time="16:00", end_time="15:00")

    def test_time_row_bad_format_raises(self):
        with pytest.raises(ValidationError):
            TimeRow(start_time="9:00", end_time="10:00")

    def test_day_column_out_of_range(self):
        with pytest.raises(ValidationError):
            DayColumn(day_of_week=7, name="Someday")

    def test_duplicate_day_raises(self):
        days = [DayColumn(day_of_week=0, name="Monday"),
                DayColumn(day_of_week=0, name="Montag")]
        with pytest.raises(ValidationError):
            TimeGridConfig(days=days, time_rows=default_time_rows("15:00", "16:00", 60))

    def test_rows_not_ascending_raises(self):
        rows = [TimeRow(start_time="16:00", end_time="17:00"),
                TimeRow(start_time="15:00", end_time="16:00")]
        with pytest.raises(ValidationError):
            TimeGridConfig(days=default_day_columns(), time_rows=rows)

    def test_empty_axes_raise(self):
        with pytest.raises(ValidationError):
            TimeGridConfig(days=[], time_rows=default_time_rows())
        with pytest.raises(ValidationError):
            TimeGridConfig(days=default_day_columns(), time_rows=[])

    def test_row_and_day_lookup(self):
        tg = afternoon_time_grid()
        assert tg.row_for("16:00").end_time == "17:00"
        assert tg.row_for("16:30") is None
        assert tg.day_for(5).name == "Saturday"
        assert tg.day_for(6) is None

    def test_editor_defaults_bad_time(self):
        with pytest.raises(ValidationError):
            EditorDefaults(start_time="3pm")


# ─── CONFIG-MANAGER ───────────────────────────────────────────────────────────

class TestConfigManager:
    def test_save_and_load_roundtrip(self, tmp_path: Path):
        """Gespeicherte Config lässt sich unverändert wieder laden."""
        mgr = _mgr(tmp_path)
        config = default_timetable_config()
        config.business_name = "Test Club"
        mgr.save(config)

        loaded = mgr.load()
        assert loaded == config
        assert loaded.business_name == "Test Club"
        assert len(loaded.time_grid.time_rows) == 32

    def test_saved_yaml_has_section_comments(self, tmp_path: Path):
        mgr = _mgr(tmp_path)
        mgr.save(default_timetable_config())
        text = mgr.DEFAULT_CONFIG.read_text(encoding="utf-8")
        assert "Wochenraster" in text
        assert "Slot-Editor" in text

    def test_first_run_check_no_file(self, tmp_path: Path):
        mgr = ConfigManager()
        mgr.DEFAULT_CONFIG = tmp_path / "nonexistent.yaml"
        assert mgr.first_run_check() is True

    def test_first_run_check_with_file(self, tmp_path: Path):
        mgr = _mgr(tmp_path)
        mgr.save(TimetableConfig(time_grid=afternoon_time_grid()))
        assert mgr.first_run_check() is False

    def test_load_nonexistent_raises(self, tmp_path: Path):
        mgr = ConfigManager()
        with pytest.raises(FileNotFoundError):
            mgr.load(tmp_path / "not_there.yaml")

    def test_load_invalid_raises_value_error(self, tmp_path: Path):
        path = tmp_path / "broken.yaml"
        path.write_text("time_grid:\n  days: []\n  time_rows: []\n", encoding="utf-8")
        with pytest.raises(ValueError, match="ungültig"):
            ConfigManager().load(path)
