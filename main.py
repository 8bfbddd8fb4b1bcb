"""Wochenplan für Coaches: Haupt-CLI.

Verwendung:
  python main.py setup                         Konfiguration anlegen
  python main.py config show                   Konfiguration anzeigen
  python main.py coach add <name>              Coach anlegen
  python main.py coach list                    Coaches auflisten
  python main.py demo                          Demo-Woche erzeugen
  python main.py week [--week D] [--coach ID]  Wochenraster anzeigen
  python main.py slot add|edit|move|delete     Slots bearbeiten
  python main.py template save|apply|list      Vorlagen (Fixed Rota)
  python main.py summary                       Wochenübersicht
  python main.py export                        Woche als Excel exportieren
"""

import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()

SLOT_TYPE_CHOICES = ["121", "ASC", "GDS", "OBS", "AVAILABLE"]


def _load_config_or_abort():
    """Lädt die Konfiguration oder bricht mit Fehlermeldung ab."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    if mgr.first_run_check():
        console.print(
            "[red]Keine Konfiguration gefunden.[/red]\n"
            "Führen Sie zunächst [bold]python main.py setup[/bold] aus."
        )
        sys.exit(1)
    try:
        return mgr, mgr.load()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)


def _open_store(config):
    """Öffnet die JSON-Ablage aus der Konfiguration."""
    from data.slot_store import JsonSlotStore, SlotStoreError
    try:
        return JsonSlotStore(config.storage.data_file,
                             config.storage.reject_coach_double_booking)
    except SlotStoreError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)


def _parse_week(ctx, param, value: Optional[str]) -> Optional[date]:
    """click-Callback: ISO-Datum → Montag der Woche."""
    if value is None:
        return None
    from grid.week_range import parse_week
    try:
        return parse_week(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from None


def _week_or_today(week: Optional[date]) -> date:
    from grid.week_range import week_start_for
    return week or week_start_for(date.today())


def _make_board(config, store, week: Optional[date]):
    from grid.board import TimetableBoard
    return TimetableBoard(
        store, config.time_grid,
        week_start=_week_or_today(week),
        editor_defaults=config.editor,
    )


def _print_board(board, hide_empty_rows: bool = False) -> None:
    from export.tui_renderer import build_week_table, legend_markup
    console.print(build_week_table(board, hide_empty_rows=hide_empty_rows))
    console.print(legend_markup())


def _print_editor_errors(editor) -> None:
    for field, message in editor.errors.items():
        console.print(f"  [red]✗[/red] {field}: {message}")
    if editor.error:
        console.print(f"[red]{editor.error}[/red]")


week_option = click.option(
    "--week", "-w", callback=_parse_week, default=None,
    help="Ein Datum der Woche (ISO, z.B. 2026-01-28). Default: aktuelle Woche.")


# ─── SETUP ────────────────────────────────────────────────────────────────────

@click.command("setup")
@click.option("--business-name", default="Kids Activity Club",
              help="Name des Anbieters.")
@click.option("--grid", "grid_kind", type=click.Choice(["full", "afternoon"]),
              default="full",
              help="full: Mo–So 06–22 Uhr (30 min), afternoon: Mo–Sa 15–19 Uhr.")
def cmd_setup(business_name: str, grid_kind: str):
    """Ersteinrichtung: Konfiguration mit Standard-Raster anlegen."""
    from config.defaults import afternoon_time_grid, default_timetable_config
    from config.manager import ConfigManager

    mgr = ConfigManager()
    if not mgr.first_run_check():
        console.print("[yellow]Eine Konfiguration existiert bereits.[/yellow]")
        if not click.confirm("Trotzdem neu einrichten?", default=False):
            return

    config = default_timetable_config()
    config.business_name = business_name
    if grid_kind == "afternoon":
        config.time_grid = afternoon_time_grid()
    mgr.save(config)
    console.print("[bold green]Einrichtung abgeschlossen![/bold green]")
    console.print("Legen Sie jetzt Coaches an: [bold]python main.py coach add[/bold] "
                  "oder [bold]python main.py demo[/bold].")


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen."""


@cmd_config.command("show")
def config_show():
    """Zeigt die aktuelle Konfiguration an."""
    mgr, config = _load_config_or_abort()

    console.print(Panel(
        f"[bold]{config.business_name}[/bold]  |  "
        f"Daten: {config.storage.data_file}",
        title="Konfiguration",
        border_style="cyan",
    ))

    tg = config.time_grid
    table = Table(title="Tages-Spalten", box=box.ROUNDED)
    table.add_column("Index", justify="right")
    table.add_column("Name")
    table.add_column("Kurz")
    for d in tg.days:
        table.add_row(str(d.day_of_week), d.name, d.short_name)
    console.print(table)

    table2 = Table(title="Zeit-Zeilen", box=box.ROUNDED)
    table2.add_column("Beginn")
    table2.add_column("Ende")
    for r in tg.time_rows:
        table2.add_row(r.start_time, r.end_time)
    console.print(table2)

    ed = config.editor
    console.print(
        f"\n[bold]Editor-Vorbelegung:[/bold] Tag {ed.day_of_week} | "
        f"{ed.start_time}–{ed.end_time}"
    )
    console.print(
        f"[bold]Doppelbelegung ablehnen:[/bold] "
        f"{'ja' if config.storage.reject_coach_double_booking else 'nein'}"
    )


# ─── COACHES ──────────────────────────────────────────────────────────────────

@click.group("coach")
def cmd_coach():
    """Coaches verwalten."""


@cmd_coach.command("add")
@click.argument("name")
@click.option("--id", "coach_id", default=None, help="Eigene Coach-ID.")
def coach_add(name: str, coach_id: Optional[str]):
    """Legt einen Coach an."""
    from data.slot_store import SlotStoreError
    from pydantic import ValidationError

    mgr, config = _load_config_or_abort()
    store = _open_store(config)
    try:
        coach = store.add_coach(name, coach_id=coach_id)
    except (SlotStoreError, ValidationError) as e:
        console.print(f"[red]Coach konnte nicht angelegt werden:[/red] {e}")
        sys.exit(1)
    console.print(f"[green]✓[/green] Coach angelegt: {coach.name} ({coach.id})")


@cmd_coach.command("list")
@click.option("--all", "show_all", is_flag=True, default=False,
              help="Auch inaktive Coaches anzeigen.")
def coach_list(show_all: bool):
    """Listet alle Coaches auf."""
    mgr, config = _load_config_or_abort()
    store = _open_store(config)
    coaches = store.list_coaches(active_only=not show_all)
    if not coaches:
        console.print("[dim]Keine Coaches vorhanden.[/dim]")
        return

    table = Table(title="Coaches", box=box.ROUNDED)
    table.add_column("ID", style="bold")
    table.add_column("Name")
    table.add_column("Kürzel")
    table.add_column("Aktiv")
    for c in coaches:
        table.add_row(c.id, c.name, c.abbreviation, "✓" if c.active else "–")
    console.print(table)


# ─── DEMO ─────────────────────────────────────────────────────────────────────

@click.command("demo")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--coaches", "num_coaches", default=5, help="Anzahl Demo-Coaches.")
@week_option
def cmd_demo(seed: int, num_coaches: int, week: Optional[date]):
    """Erzeugt Demo-Coaches und füllt eine Woche."""
    from data.fake_data import DemoDataGenerator
    from data.slot_store import SlotStoreError

    mgr, config = _load_config_or_abort()
    store = _open_store(config)
    week_start = _week_or_today(week)
    if store.list_slots(week_start):
        console.print(f"[yellow]Die Woche {week_start} enthält bereits Slots.[/yellow]")
        sys.exit(1)

    console.print("[bold]Demo-Daten werden erzeugt...[/bold]")
    try:
        gen = DemoDataGenerator(config, seed=seed, num_coaches=num_coaches)
        slots = gen.generate(store, week_start)
    except (SlotStoreError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    gen.print_summary(slots)
    console.print(f"[green]✓[/green] Gespeichert: {config.storage.data_file}")


# ─── WEEK ─────────────────────────────────────────────────────────────────────

@click.command("week")
@week_option
@click.option("--coach", "coach_id", default=None, help="Nur diesen Coach anzeigen.")
@click.option("--prev", "prev_weeks", default=0, help="Wochen zurück blättern.")
@click.option("--next", "next_weeks", default=0, help="Wochen vor blättern.")
@click.option("--hide-empty", is_flag=True, default=False,
              help="Zeilen ohne Slots ausblenden.")
def cmd_week(week: Optional[date], coach_id: Optional[str],
             prev_weeks: int, next_weeks: int, hide_empty: bool):
    """Zeigt das Wochenraster an."""
    mgr, config = _load_config_or_abort()
    store = _open_store(config)
    board = _make_board(config, store, week)

    for _ in range(prev_weeks):
        board.navigator.previous()
    for _ in range(next_weeks):
        board.navigator.next()

    if coach_id:
        try:
            board.set_coach_filter(coach_id)
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            sys.exit(1)

    if board.last_error:
        console.print(f"[red]{board.last_error}[/red]")
        sys.exit(1)
    _print_board(board, hide_empty_rows=hide_empty)
    if board.navigator.is_current_week:
        console.print("[dim]Aktuelle Woche[/dim]")


# ─── SLOT ─────────────────────────────────────────────────────────────────────

@click.group("slot")
def cmd_slot():
    """Slots anlegen, bearbeiten, verschieben und löschen."""


@cmd_slot.command("add")
@week_option
@click.option("--day", "-d", type=click.IntRange(0, 6), default=None,
              help="Wochentag (0=Montag .. 6=Sonntag).")
@click.option("--start", default=None, help="Beginn HH:MM.")
@click.option("--end", default=None, help="Ende HH:MM.")
@click.option("--coach", "coach_id", default=None, help="Coach-ID.")
@click.option("--type", "slot_type", type=click.Choice(SLOT_TYPE_CHOICES),
              default="AVAILABLE")
@click.option("--student", default="", help="Schülername (Pflicht außer AVAILABLE).")
@click.option("--notes", default="")
def slot_add(week, day, start, end, coach_id, slot_type, student, notes):
    """Legt einen Slot an (Editor im Anlege-Modus)."""
    mgr, config = _load_config_or_abort()
    store = _open_store(config)
    board = _make_board(config, store, week)

    if start and not end:
        # Ende aus der Raster-Zeile übernehmen
        row = config.time_grid.row_for(start)
        end = row.end_time if row else None

    editor = board.editor
    editor.open(None, board.week_start, default_day=day,
                default_start=start, default_end=end)
    values = {"slot_type": slot_type, "student_name": student, "notes": notes}
    if coach_id:
        values["coach_id"] = coach_id
    editor.set(**values)

    slot = board.save_editor()
    if slot is None:
        console.print("[red bold]Slot wurde nicht gespeichert.[/red bold]")
        _print_editor_errors(editor)
        sys.exit(1)
    console.print(f"[green]✓[/green] Slot angelegt: {slot.id}")
    _print_board(board, hide_empty_rows=True)


def _board_for_slot(config, store, slot_id: str):
    """Board in der Woche des Slots öffnen."""
    from data.slot_store import SlotNotFoundError
    try:
        slot = store.get_slot(slot_id)
    except SlotNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    return _make_board(config, store, slot.week_start)


@cmd_slot.command("edit")
@click.argument("slot_id")
@click.option("--day", "-d", type=click.IntRange(0, 6), default=None)
@click.option("--start", default=None, help="Beginn HH:MM.")
@click.option("--end", default=None, help="Ende HH:MM.")
@click.option("--coach", "coach_id", default=None, help="Coach-ID.")
@click.option("--type", "slot_type", type=click.Choice(SLOT_TYPE_CHOICES), default=None)
@click.option("--student", default=None)
@click.option("--notes", default=None)
def slot_edit(slot_id, day, start, end, coach_id, slot_type, student, notes):
    """Bearbeitet einen Slot (Editor im Bearbeiten-Modus)."""
    mgr, config = _load_config_or_abort()
    store = _open_store(config)
    board = _board_for_slot(config, store, slot_id)

    editor = board.activate_slot(slot_id)
    values = {
        "day_of_week": day, "start_time": start, "end_time": end,
        "coach_id": coach_id, "slot_type": slot_type,
        "student_name": student, "notes": notes,
    }
    editor.set(**{k: v for k, v in values.items() if v is not None})

    slot = board.save_editor()
    if slot is None:
        console.print("[red bold]Änderung wurde nicht gespeichert.[/red bold]")
        _print_editor_errors(editor)
        sys.exit(1)
    console.print(f"[green]✓[/green] Slot aktualisiert: {slot.id}")


@cmd_slot.command("move")
@click.argument("slot_id")
@click.option("--day", "-d", type=click.IntRange(0, 6), required=True)
@click.option("--start", required=True, help="Beginn der Ziel-Zeile HH:MM.")
def slot_move(slot_id: str, day: int, start: str):
    """Verschiebt einen Slot in eine andere Zelle (Drag & Drop)."""
    mgr, config = _load_config_or_abort()
    store = _open_store(config)
    board = _board_for_slot(config, store, slot_id)

    try:
        result = board.relocate(slot_id, day, start)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    if result.moved:
        console.print(f"[green]✓[/green] Slot verschoben nach {result.target.key}")
    elif result.error:
        console.print(f"[red]{result.error}[/red]")
        sys.exit(1)
    else:
        console.print("[dim]Keine Änderung (Quellzelle).[/dim]")


@cmd_slot.command("delete")
@click.argument("slot_id")
@click.option("--yes", "-y", is_flag=True, default=False, help="Ohne Rückfrage löschen.")
def slot_delete(slot_id: str, yes: bool):
    """Löscht einen Slot."""
    mgr, config = _load_config_or_abort()
    store = _open_store(config)
    board = _board_for_slot(config, store, slot_id)

    editor = board.activate_slot(slot_id)
    if not yes and not click.confirm(
            f"Slot {slot_id} ({editor.slot.display_name()}) löschen?", default=False):
        return
    if not board.delete_from_editor():
        console.print(f"[red]{editor.error}[/red]")
        sys.exit(1)
    console.print(f"[green]✓[/green] Slot gelöscht: {slot_id}")


# ─── TEMPLATE ─────────────────────────────────────────────────────────────────

@click.group("template")
def cmd_template():
    """Vorlagen (Fixed Rota) speichern und anwenden."""


@cmd_template.command("save")
@click.argument("name")
@week_option
@click.option("--description", "-d", default="", help="Beschreibung der Vorlage.")
def template_save(name: str, week: Optional[date], description: str):
    """Speichert die Slots einer Woche als Vorlage."""
    from data.slot_store import SlotStoreError
    from data.templates import template_from_week

    mgr, config = _load_config_or_abort()
    store = _open_store(config)
    try:
        template = template_from_week(store, name, _week_or_today(week), description)
    except SlotStoreError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    console.print(
        f"[green]✓[/green] Vorlage '{template.name}' gespeichert "
        f"(ID {template.id}, {len(template.slots)} Slots)")


@cmd_template.command("apply")
@click.argument("template_id")
@week_option
@click.option("--overwrite", is_flag=True, default=False,
              help="Bestehende Slots der Woche ersetzen.")
def template_apply(template_id: str, week: Optional[date], overwrite: bool):
    """Wendet eine Vorlage auf eine Woche an."""
    from data.slot_store import SlotStoreError
    from data.templates import apply_template

    mgr, config = _load_config_or_abort()
    store = _open_store(config)
    try:
        result = apply_template(store, template_id, _week_or_today(week), overwrite)
    except SlotStoreError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    console.print(
        f"[green]✓[/green] Vorlage '{result.template_name}' angewendet: "
        f"{result.slots_created} angelegt, {result.slots_deleted} ersetzt")


@cmd_template.command("list")
def template_list():
    """Listet alle Vorlagen auf."""
    mgr, config = _load_config_or_abort()
    store = _open_store(config)
    templates = store.list_templates()

    if not templates:
        console.print("[dim]Keine Vorlagen vorhanden.[/dim]")
        return

    table = Table(title="Vorlagen", box=box.ROUNDED)
    table.add_column("ID", style="bold")
    table.add_column("Name")
    table.add_column("Slots", justify="right")
    table.add_column("Aktiv")
    table.add_column("Beschreibung")
    for t in templates:
        table.add_row(t.id, t.name, str(len(t.slots)),
                      "✓" if t.is_active else "–", t.description)
    console.print(table)


# ─── SUMMARY ──────────────────────────────────────────────────────────────────

@click.command("summary")
@week_option
def cmd_summary(week: Optional[date]):
    """Zeigt Belegung und Auslastung einer Woche."""
    from analysis.week_summary import print_rich, summarize_week

    mgr, config = _load_config_or_abort()
    store = _open_store(config)
    week_start = _week_or_today(week)
    summary = summarize_week(week_start, store.list_slots(week_start),
                             store.list_coaches(active_only=False))
    print_rich(summary)


# ─── EXPORT ───────────────────────────────────────────────────────────────────

@click.command("export")
@week_option
@click.option("--output", "-o", default=None,
              help="Ausgabepfad (Default: output/week_<datum>.xlsx).")
@click.option("--all-rows", is_flag=True, default=False,
              help="Auch Zeilen ohne Slots exportieren.")
def cmd_export(week: Optional[date], output: Optional[str], all_rows: bool):
    """Exportiert eine Woche als Excel-Datei."""
    from export.excel_export import ExcelExporter

    mgr, config = _load_config_or_abort()
    store = _open_store(config)
    week_start = _week_or_today(week)
    out_path = Path(output) if output else Path(f"output/week_{week_start}.xlsx")

    console.print("[bold]Excel-Export wird erstellt...[/bold]")
    exporter = ExcelExporter(
        config.time_grid, week_start,
        store.list_slots(week_start),
        store.list_coaches(active_only=False),
        business_name=config.business_name,
    )
    exporter.export(out_path, hide_empty_rows=not all_rows)
    console.print(f"[green]✓[/green] Excel gespeichert: {out_path}")


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False,
              help="Ausführliche Log-Ausgabe.")
def cli(verbose: bool):
    """Wochenplan für Coaches: Slots im Raster Tag × Uhrzeit.

    Starten Sie mit: python main.py setup
    """
    from rich.logging import RichHandler
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def main():
    """Einstiegspunkt. Startet beim ersten Aufruf die Einrichtung."""
    from config.manager import ConfigManager
    mgr = ConfigManager()

    if len(sys.argv) == 1 and mgr.first_run_check():
        console.print(Panel(
            "[bold]Willkommen beim Wochenplan![/bold]\n\n"
            "Keine Konfiguration gefunden.\n"
            "Die Einrichtung wird jetzt gestartet...",
            border_style="cyan",
        ))
        sys.argv.append("setup")

    cli()


# Befehle registrieren
cli.add_command(cmd_setup)
cli.add_command(cmd_config)
cli.add_command(cmd_coach)
cli.add_command(cmd_demo)
cli.add_command(cmd_week)
cli.add_command(cmd_slot)
cli.add_command(cmd_template)
cli.add_command(cmd_summary)
cli.add_command(cmd_export)


if __name__ == "__main__":
    main()
