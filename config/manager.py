"""Konfigurationsmanager für den Wochenplan.

Die Konfiguration liegt als kommentiertes YAML (ruamel.yaml) unter
config/timetable_config.yaml. Zeit-Zeilen und Tages-Spalten werden in
Kurzform ({start_time: ..., end_time: ...}) geschrieben, damit die Datei
auch bei 32 Zeilen lesbar bleibt.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.console import Console
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq

from config.schema import TimetableConfig

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


_YAML_HEADER = f"""\
# ============================================
# Wochenplan für Coaches: Konfiguration
# Erstellt: {date.today().isoformat()}
# ============================================
"""

# Abschnitt → (Überschrift, Erläuterung)
_SECTIONS: dict[str, tuple[str, Optional[str]]] = {
    "business_name": ("Anbieter", None),
    "time_grid": (
        "Wochenraster",
        "days: Spalten in Anzeigereihenfolge, day_of_week 0=Montag .. 6=Sonntag.\n"
        "time_rows: Zeilen im Format HH:MM, aufsteigend nach Beginn.",
    ),
    "storage": ("Ablage", "JSON-Datei mit Coaches, Slots und Vorlagen."),
    "editor": ("Slot-Editor", "Vorbelegung für neue Slots ohne Zellbezug."),
}


def _flow_list(items: list[dict]) -> CommentedSeq:
    """Liste von Dicts, jedes Element einzeilig."""
    seq = CommentedSeq()
    for item in items:
        entry = CommentedMap(item)
        entry.fa.set_flow_style()
        seq.append(entry)
    return seq


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "timetable_config.yaml"

    def first_run_check(self) -> bool:
        """True solange noch keine Konfigurationsdatei existiert."""
        return not self.DEFAULT_CONFIG.exists()

    def load(self, path: Optional[Path] = None) -> TimetableConfig:
        """Liest die YAML-Datei und validiert sie als TimetableConfig."""
        target = Path(path or self.DEFAULT_CONFIG)
        if not target.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {target}\n"
                f"Bitte zuerst 'python main.py setup' ausführen."
            )
        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f) or {}
        try:
            return TimetableConfig.model_validate(json.loads(json.dumps(raw)))
        except (ValidationError, TypeError) as e:
            raise ValueError(f"Konfigurationsdatei ungültig: {target}\n{e}") from e

    def save(self, config: TimetableConfig, path: Optional[Path] = None) -> None:
        """Schreibt die Konfiguration als kommentiertes YAML."""
        target = Path(path or self.DEFAULT_CONFIG)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(self._to_yaml(config), f)
        console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")

    def _to_yaml(self, config: TimetableConfig) -> CommentedMap:
        data = config.model_dump(mode="json")

        grid = CommentedMap()
        grid["days"] = _flow_list(data["time_grid"]["days"])
        grid["time_rows"] = _flow_list(data["time_grid"]["time_rows"])

        storage = CommentedMap(data["storage"])
        storage.yaml_add_eol_comment("relativ zum Arbeitsverzeichnis", "data_file")

        root = CommentedMap()
        root["business_name"] = data["business_name"]
        root["time_grid"] = grid
        root["storage"] = storage
        root["editor"] = CommentedMap(data["editor"])

        for key, (title, note) in _SECTIONS.items():
            text = f"\n─── {title} ───" + (f"\n{note}" if note else "")
            root.yaml_set_comment_before_after_key(key, before=text)
        return root
