"""Command-line interface for Refurb Inspector."""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from refurb_inspector import __version__
from refurb_inspector.analysis import IndicatorRuleEngine, get_profile, list_profiles
from refurb_inspector.config import EngineConfig, load_config
from refurb_inspector.core import FactCollector, ReportAssembler, load_facts, save_facts
from refurb_inspector.models import Facts, HardwareTelemetry, RefurbishmentReport
from refurb_inspector.output.json_export import JSONExporter
from refurb_inspector.probes import select_probes
from refurb_inspector.utils.exceptions import RefurbInspectorError

console = Console()


def print_status(status: str, message: str) -> None:
    """Print a status message with consistent formatting.

    Args:
        status: Status indicator ([OK], [FAIL], [WARN], [INFO], [ERROR])
        message: Message to display
    """
    color_map = {
        "[OK]": "green",
        "[FAIL]": "red",
        "[WARN]": "yellow",
        "[INFO]": "blue",
        "[ERROR]": "red bold",
    }
    color = color_map.get(status, "white")
    console.print(f"[{color}]{escape(status)}[/{color}] {escape(message)}")


def _configure_logging(verbose: int) -> None:
    if verbose <= 0:
        return
    level = logging.DEBUG if verbose > 1 else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _build_config(
    config_file: Optional[str],
    profile: Optional[str],
    rules: Optional[str],
) -> EngineConfig:
    """Load configuration and apply command-line overrides."""
    config = load_config(Path(config_file) if config_file else None)
    updates = {}
    if profile:
        updates["profile"] = profile
    if rules:
        updates["rules_file"] = Path(rules)
    return config.model_copy(update=updates) if updates else config


def _emit_report_json(report: RefurbishmentReport, output: Optional[str]) -> None:
    exporter = JSONExporter()
    if output:
        exporter.to_file(report, output)
        print_status("[OK]", f"Report saved to: {output}")
    else:
        click.echo(exporter.to_json(report))


@click.group()
@click.version_option(version=__version__, prog_name="refurb-inspector")
def main():
    """Refurb Inspector - Refurbishment and part-swap detection.

    Collects hardware facts (serial number, firmware flags, enrollment,
    storage and display identity, battery data) and reports whether the
    machine appears refurbished or has replaced components.
    """


def _assessment_options(func):
    """Options shared by the check and assess commands."""
    options = [
        click.option("-o", "--output", help="Output file path for JSON report"),
        click.option(
            "-f", "--format", "output_format",
            type=click.Choice(["json", "table"]), default="table",
        ),
        click.option("--profile", help="Vendor profile name (default: from platform)"),
        click.option(
            "--rules", type=click.Path(exists=True),
            help="Custom indicator rules file (YAML/JSON)",
        ),
        click.option(
            "--config", "config_file", type=click.Path(exists=True),
            help="Engine configuration file (YAML/JSON)",
        ),
        click.option("-v", "--verbose", count=True, help="Verbosity level"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _run_assessment(
    facts_source,
    output: Optional[str],
    output_format: str,
    profile: Optional[str],
    rules: Optional[str],
    config_file: Optional[str],
    verbose: int,
) -> None:
    """Shared body of check/assess: build the engine, get facts, report."""
    _configure_logging(verbose)
    try:
        config = _build_config(config_file, profile, rules)
        assembler = ReportAssembler.from_config(config)
        facts = facts_source(config)
        report = assembler.assemble(facts)

        if output_format == "json" or output:
            _emit_report_json(report, output)
        else:
            _print_report(report, facts, verbose)

    except RefurbInspectorError as e:
        print_status("[ERROR]", str(e))
        sys.exit(1)
    except Exception as e:
        print_status("[ERROR]", f"Assessment failed: {e}")
        if verbose > 0:
            console.print_exception()
        sys.exit(1)


@main.command()
@_assessment_options
def check(output, output_format, profile, rules, config_file, verbose):
    """Collect facts on this machine and assess them.

    Runs the platform probes (ioreg, diskutil, system_profiler and
    profiles on macOS; PowerShell/CIM queries on Windows) and prints the
    refurbishment report.
    """
    def collect_here(config: EngineConfig) -> Facts:
        collector = FactCollector(
            select_probes(command_timeout=config.probe_timeout_seconds),
            timeout=config.probe_timeout_seconds,
            max_workers=config.max_workers,
            show_progress=output_format == "table" and not output,
        )
        return collector.collect()

    _run_assessment(collect_here, output, output_format, profile, rules, config_file, verbose)


@main.command()
@click.argument("facts_file", type=click.Path())
@_assessment_options
def assess(facts_file, output, output_format, profile, rules, config_file, verbose):
    """Assess a previously captured facts bundle.

    FACTS_FILE is a JSON or YAML file as written by the collect command.
    """
    _run_assessment(
        lambda config: load_facts(Path(facts_file)),
        output, output_format, profile, rules, config_file, verbose,
    )


@main.command()
@click.option("-o", "--output", help="Output file path for the facts bundle")
@click.option(
    "--config", "config_file", type=click.Path(exists=True),
    help="Engine configuration file (YAML/JSON)",
)
@click.option("-v", "--verbose", count=True, help="Verbosity level")
def collect(output: str, config_file: str, verbose: int):
    """Collect facts on this machine and dump them as JSON.

    The resulting file can be assessed later (or elsewhere) with the
    assess command.
    """
    _configure_logging(verbose)
    try:
        config = load_config(Path(config_file) if config_file else None)
        collector = FactCollector(
            select_probes(command_timeout=config.probe_timeout_seconds),
            timeout=config.probe_timeout_seconds,
            max_workers=config.max_workers,
        )
        facts = collector.collect()

        if output:
            save_facts(facts, Path(output))
            print_status("[OK]", f"Facts saved to: {output}")
        else:
            click.echo(facts.model_dump_json(indent=2))

    except RefurbInspectorError as e:
        print_status("[ERROR]", str(e))
        sys.exit(1)


@main.command()
@click.option(
    "-f", "--format", "output_format",
    type=click.Choice(["json", "table"]), default="table",
)
@click.option("-v", "--verbose", count=True, help="Verbosity level")
def hardware(output_format: str, verbose: int):
    """Show battery and storage health for this machine."""
    _configure_logging(verbose)
    try:
        config = load_config()
        collector = FactCollector(
            select_probes(command_timeout=config.probe_timeout_seconds),
            timeout=config.probe_timeout_seconds,
            max_workers=config.max_workers,
        )
        telemetry = collector.collect_telemetry()

        if output_format == "json":
            click.echo(telemetry.model_dump_json(indent=2))
        else:
            _print_telemetry(telemetry)

    except RefurbInspectorError as e:
        print_status("[ERROR]", str(e))
        sys.exit(1)


def _print_report(report: RefurbishmentReport, facts: Facts, verbose: int) -> None:
    """Print a refurbishment report as formatted tables."""
    confidence_colors = {
        "low": "green",
        "medium": "yellow",
        "high": "red",
    }
    confidence_color = confidence_colors.get(report.confidence.value, "white")
    verdict = "[red]REFURBISHED[/red]" if report.is_refurbished else "[green]ORIGINAL[/green]"

    console.print(Panel(
        f"Verdict: {verdict}\n"
        f"[{confidence_color}]Confidence: {report.confidence.value.upper()}[/{confidence_color}]\n"
        f"Platform: {escape(facts.platform or 'unknown')}",
        title="Refurbishment Assessment",
        style="bold",
    ))
    console.print()

    if report.indicators:
        severity_colors = {
            "info": "blue",
            "warning": "yellow",
            "critical": "red",
        }
        table = Table(title="Indicators", show_header=True, header_style="bold")
        table.add_column("Name", style="cyan")
        table.add_column("Severity")
        table.add_column("Description")

        for indicator in report.indicators:
            severity_color = severity_colors.get(indicator.severity.value, "white")
            table.add_row(
                indicator.name,
                f"[{severity_color}]{indicator.severity.value.upper()}[/{severity_color}]",
                escape(indicator.description),
            )
        console.print(table)
        console.print()
    else:
        print_status("[OK]", "No refurbishment indicators detected")
        console.print()

    if report.replaced_parts:
        console.print("[bold]Replaced Parts:[/bold]")
        for part in report.replaced_parts:
            console.print(f"  [red][FAIL][/red] {escape(part)}")
        console.print()

    details = report.details
    table = Table(title="Provenance Details", show_header=True, header_style="bold")
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    rows = [
        ("Refurb Program", details.refurb_program),
        ("Serial Date Code", details.serial_manufacture_date),
        ("OS Install Date", details.os_install_date),
        ("Battery Manufacture Date", details.battery_manufacture_date),
        ("Storage First Use", details.storage_first_use_date),
    ]
    for label, value in rows:
        table.add_row(label, escape(value) if value else "[dim]N/A[/dim]")
    table.add_row(
        "Date Cross-check",
        "[yellow][WARN][/yellow]" if details.date_mismatch else "[dim]N/A[/dim]",
    )
    console.print(table)

    if verbose > 1:
        console.print()
        console.print(Panel(
            escape(facts.model_dump_json(indent=2, exclude={"firmware_dump"})),
            title="Collected Facts",
            style="dim",
        ))


def _print_telemetry(telemetry: HardwareTelemetry) -> None:
    """Print hardware telemetry as formatted tables."""
    table = Table(title="Battery", show_header=True, header_style="bold")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    battery = telemetry.battery
    if battery is None:
        table.add_row("Battery", "[dim]Not available[/dim]")
    else:
        health_color = "green" if battery.health >= 80 else "yellow"
        table.add_row("Health", f"[{health_color}]{battery.health:.1f}%[/{health_color}]")
        table.add_row("Cycle Count", str(battery.cycle_count))
        table.add_row("Design Capacity", str(battery.design_capacity))
        table.add_row("Max Capacity", str(battery.max_capacity))
        table.add_row("Current Capacity", str(battery.current_capacity))
        table.add_row("Charging", "Yes" if battery.is_charging else "No")
        if battery.temperature is not None:
            table.add_row("Temperature", f"{battery.temperature:.1f} C")
    console.print(table)
    console.print()

    table = Table(title="Storage", show_header=True, header_style="bold")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    storage = telemetry.storage
    if storage is None:
        table.add_row("Storage", "[dim]Not available[/dim]")
    else:
        smart_ok = storage.smart_status.lower() in ("verified", "healthy", "ok")
        smart_marker = "[green][OK][/green]" if smart_ok else "[yellow][WARN][/yellow]"
        table.add_row("Model", escape(storage.model))
        table.add_row("SMART Status", f"{smart_marker} {escape(storage.smart_status)}")
        if storage.power_on_hours is not None:
            table.add_row("Power-on Hours", str(storage.power_on_hours))
    console.print(table)


@main.command(name="list-rules")
@click.option("--format", "output_format", type=click.Choice(["table", "json"]), default="table")
@click.option("--profile", help="Show rule toggles for this vendor profile")
def list_rules(output_format: str, profile: Optional[str]):
    """List all built-in refurbishment indicator rules.

    With --profile, the Active column reflects that profile's toggles.
    """
    try:
        engine = IndicatorRuleEngine(profile=get_profile(profile) if profile else None)
    except RefurbInspectorError as e:
        print_status("[ERROR]", str(e))
        sys.exit(1)

    rules = engine.get_builtin_rules()

    if output_format == "json":
        rules_list = [
            {
                "id": r.rule_id,
                "name": r.name,
                "description": r.description,
                "severity": r.severity.value,
                "enabled": r.enabled,
                "active": engine.is_rule_active(r),
            }
            for r in rules
        ]
        click.echo(json.dumps(rules_list, indent=2))
        return

    console.print(Panel(
        f"[bold]Built-in Indicator Rules[/bold]\nProfile: {engine.profile.name}",
        style="blue",
    ))

    table = Table(show_header=True, header_style="bold")
    table.add_column("Rule ID", style="cyan")
    table.add_column("Name")
    table.add_column("Severity")
    table.add_column("Active")

    severity_colors = {
        "info": "blue",
        "warning": "yellow",
        "critical": "red",
    }

    for rule in rules:
        severity_color = severity_colors.get(rule.severity.value, "white")
        active = "[green][OK][/green]" if engine.is_rule_active(rule) else "[dim]No[/dim]"
        table.add_row(
            rule.rule_id,
            rule.name,
            f"[{severity_color}]{rule.severity.value.upper()}[/{severity_color}]",
            active,
        )

    console.print(table)
    console.print()
    console.print(f"[dim]Total: {len(rules)} built-in rules[/dim]")


@main.command()
def info():
    """Display tool information and supported platforms."""
    profiles = ", ".join(sorted(list_profiles()))
    console.print(Panel(
        f"[bold]Refurb Inspector v{__version__}[/bold]\n\n"
        "Refurbishment and part-swap detection for laptops and desktops\n\n"
        "[bold]Supported Platforms:[/bold]\n"
        "  [->] macOS: ioreg, diskutil, system_profiler, profiles\n"
        "  [->] Windows: PowerShell CIM queries and registry\n"
        "  [->] Other: assess captured facts files only\n\n"
        "[bold]Evidence Engine:[/bold]\n"
        "  [*] 8 built-in indicator rules\n"
        "  [*] Custom rules via YAML/JSON\n"
        "  [*] Vendor profiles with first-party component tables\n"
        "  [*] Confidence tiers: low, medium, high\n"
        "  [*] JSON export for UI layers\n\n"
        f"[bold]Vendor Profiles:[/bold] {escape(profiles)}",
        title="About",
        style="blue",
    ))


if __name__ == "__main__":
    main()
