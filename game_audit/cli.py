"""CLI entrypoint for game-audit."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Annotated

import typer

from game_audit import __version__
from game_audit.catalog import Catalog
from game_audit.checks import list_check_info
from game_audit.config import AppConfig, default_config_template, load_app_config
from game_audit.fixer import apply_fixes
from game_audit.fixes import list_fix_info
from game_audit.log import configure_logging
from game_audit.output import (
    build_scan_payload,
    render_fix_human,
    render_fix_json,
    render_scan_human,
    render_scan_json,
)
from game_audit.report import write_report
from game_audit.scoring import scan_portfolio
from game_audit.store import ArtifactStore, StoreError

app = typer.Typer(
    name="game-audit",
    no_args_is_help=True,
    help="Scan HTML game artifacts for compliance patterns and apply deterministic fixes.",
)

RootOption = Annotated[Path, typer.Option("--root", help="Project root path.")]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Path to config TOML file."),
]


def version_callback(value: bool) -> None:
    """Print version and exit when --version is provided."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option("--version", help="Show version and exit.", callback=version_callback),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log backups, fixes and report writes."),
    ] = False,
) -> None:
    """Root command callback."""
    _ = version
    configure_logging(verbose=verbose)


@app.command("run-report")
def run_report_command(
    root: RootOption = Path("."),
    category: Annotated[
        str | None, typer.Option(help="Only run checks from this category.")
    ] = None,
    format: Annotated[
        str | None, typer.Option(help="Output format: human|json.", show_default="human")
    ] = None,
    save: Annotated[
        bool | None,
        typer.Option("--save/--no-save", help="Persist a timestamped JSON report."),
    ] = None,
    config_file: ConfigOption = None,
) -> None:
    """Scan the configured artifacts and summarize compliance."""
    app_config = _load_config_or_raise(root, config_file)
    output_format = _format_or_raise(format or app_config.format)
    catalog = _build_catalog_or_raise(app_config)
    _check_category_or_raise(catalog, category)

    root_path = root.resolve()
    generated_at = datetime.now(tz=UTC)
    store = ArtifactStore(app_config.games_path(root_path))
    scan = scan_portfolio(
        store,
        catalog,
        app_config.artifacts,
        category=category,
        warning_limit=app_config.scoring.composite_warning_limit,
        generated_at=generated_at,
    )

    if output_format == "json":
        typer.echo(render_scan_json(scan, root=str(root_path), generated_at=generated_at))
    else:
        typer.echo(render_scan_human(scan))

    should_save = save if save is not None else app_config.save_report
    if should_save:
        payload = build_scan_payload(scan, root=str(root_path), generated_at=generated_at)
        written = write_report(payload, app_config.report_path(root_path), now=generated_at)
        if written.path is not None:
            message = f"Report written to: {written.path}"
        else:
            message = f"Report not written: {written.error}"
        typer.echo(message, err=output_format == "json")

    if scan.exit_code:
        raise typer.Exit(code=scan.exit_code)


@app.command("run-fix")
def run_fix_command(
    root: RootOption = Path("."),
    category: Annotated[
        str | None, typer.Option(help="Only apply fixes from this category.")
    ] = None,
    fix: Annotated[
        list[str] | None,
        typer.Option("--fix", help="Fix id to apply; repeat for several."),
    ] = None,
    format: Annotated[
        str | None, typer.Option(help="Output format: human|json.", show_default="human")
    ] = None,
    config_file: ConfigOption = None,
) -> None:
    """Apply fixes to their target artifacts, backing each one up first."""
    app_config = _load_config_or_raise(root, config_file)
    output_format = _format_or_raise(format or app_config.format)
    catalog = _build_catalog_or_raise(app_config)
    _check_category_or_raise(catalog, category)

    root_path = root.resolve()
    store = ArtifactStore(
        app_config.games_path(root_path),
        backup_dir=app_config.backup_path(root_path),
    )
    try:
        result = apply_fixes(catalog, store, category=category, fix_ids=fix)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--fix") from exc

    if output_format == "json":
        typer.echo(render_fix_json(result, root=str(root_path)))
    else:
        typer.echo(render_fix_human(result))

    if result.exit_code:
        raise typer.Exit(code=result.exit_code)


@app.command("restore")
def restore_command(
    artifact: Annotated[str, typer.Argument(help="Artifact name to restore.")],
    root: RootOption = Path("."),
    config_file: ConfigOption = None,
) -> None:
    """Copy the most recent backup over an artifact."""
    app_config = _load_config_or_raise(root, config_file)
    root_path = root.resolve()
    store = ArtifactStore(
        app_config.games_path(root_path),
        backup_dir=app_config.backup_path(root_path),
    )
    try:
        backup = store.restore(artifact)
    except StoreError as exc:
        typer.echo(f"Restore failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(f"Restored {artifact} from {backup.backup_id}")


@app.command("checks")
def checks_command(
    root: RootOption = Path("."),
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
    config_file: ConfigOption = None,
) -> None:
    """List available checks and whether configuration enables them."""
    output_format = _format_or_raise(format)
    app_config = _load_config_or_raise(root, config_file)
    catalog = _build_catalog_or_raise(app_config)
    active_ids = {check.check_id for check in catalog.checks()}
    check_info = list_check_info()

    if output_format == "json":
        payload = {
            "checks": [
                {
                    "check_id": item.check_id,
                    "name": item.name,
                    "category": item.category,
                    "description": item.description,
                    "enabled": item.check_id in active_ids,
                }
                for item in check_info
            ],
            "meta": {"config_source": app_config.source},
        }
        typer.echo(json.dumps(payload, sort_keys=True))
        return

    lines = ["Available checks:"]
    for item in check_info:
        status = "enabled" if item.check_id in active_ids else "disabled"
        lines.append(f"- {item.check_id} ({item.category}) [{status}] - {item.description}")
    typer.echo("\n".join(lines))


@app.command("fixes")
def fixes_command(
    root: RootOption = Path("."),
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
    config_file: ConfigOption = None,
) -> None:
    """List available fixes, their targets, and whether configuration enables them."""
    output_format = _format_or_raise(format)
    app_config = _load_config_or_raise(root, config_file)
    catalog = _build_catalog_or_raise(app_config)
    active = {item.fix_id: item for item in catalog.fixes}

    entries = []
    for info in list_fix_info():
        configured = active.get(info.fix_id)
        entries.append(
            {
                "fix_id": info.fix_id,
                "name": info.name,
                "category": info.category,
                "check_ids": list(info.check_ids),
                "targets": list(configured.targets if configured else info.targets),
                "enabled": configured is not None,
            }
        )

    if output_format == "json":
        payload = {"fixes": entries, "meta": {"config_source": app_config.source}}
        typer.echo(json.dumps(payload, sort_keys=True))
        return

    lines = ["Available fixes:"]
    for entry in entries:
        status = "enabled" if entry["enabled"] else "disabled"
        lines.append(
            f"- {entry['fix_id']} ({entry['category']}) [{status}] - {entry['name']}, "
            f"{len(entry['targets'])} targets"
        )
    typer.echo("\n".join(lines))


@app.command("config")
def config_command(
    root: RootOption = Path("."),
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
    config_file: ConfigOption = None,
) -> None:
    """Show resolved configuration."""
    output_format = _format_or_raise(format)
    app_config = _load_config_or_raise(root, config_file)
    catalog = _build_catalog_or_raise(app_config)
    payload = app_config.to_dict()
    payload["active_check_ids"] = [check.check_id for check in catalog.checks()]
    payload["active_fix_ids"] = [item.fix_id for item in catalog.fixes]

    if output_format == "json":
        typer.echo(json.dumps(payload, sort_keys=True))
        return

    lines = [
        "Resolved configuration:",
        f"- source: {payload['source'] or 'defaults'}",
        f"- games_dir: {payload['games_dir']}",
        f"- report_dir: {payload['report_dir']}",
        f"- backup_dir: {payload['backup_dir'] or '(alongside artifacts)'}",
        f"- format: {payload['format']}",
        f"- artifacts: {len(payload['artifacts'])}",
        f"- composite_warning_limit: {payload['scoring']['composite_warning_limit']}",
        f"- active_check_ids: {payload['active_check_ids']}",
        f"- active_fix_ids: {payload['active_fix_ids']}",
    ]
    typer.echo("\n".join(lines))


@app.command("config-init")
def config_init_command(
    out: Annotated[Path, typer.Option(help="Output path for starter config TOML.")] = Path(
        ".game-audit.toml"
    ),
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite if file already exists."),
    ] = False,
) -> None:
    """Create a starter project config file."""
    out_path = out.resolve()
    if out_path.exists() and not force:
        raise typer.BadParameter(
            f"Refusing to overwrite existing file: {out_path}. Use --force to overwrite."
        )
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(default_config_template(), encoding="utf-8")
    typer.echo(f"Wrote starter config: {out_path}")


@app.command("config-validate")
def config_validate_command(
    root: RootOption = Path("."),
    config_file: Annotated[
        Path,
        typer.Option("--config", help="Path to config TOML file to validate."),
    ] = Path(".game-audit.toml"),
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
) -> None:
    """Validate a config file and report active checks and fixes."""
    output_format = _format_or_raise(format)
    app_config = _load_config_or_raise(root, config_file)
    catalog = _build_catalog_or_raise(app_config)
    payload = {
        "ok": True,
        "source": app_config.source,
        "active_check_ids": [check.check_id for check in catalog.checks()],
        "active_fix_ids": [item.fix_id for item in catalog.fixes],
    }
    if output_format == "json":
        typer.echo(json.dumps(payload, sort_keys=True))
        return
    typer.echo(
        "\n".join(
            [
                "Config is valid.",
                f"- source: {payload['source']}",
                f"- active_check_ids: {payload['active_check_ids']}",
                f"- active_fix_ids: {payload['active_fix_ids']}",
            ]
        )
    )


def main() -> None:
    """Console script entrypoint."""
    app()


def _load_config_or_raise(root: Path, config_file: Path | None = None) -> AppConfig:
    try:
        return load_app_config(root, config_path=config_file)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="config") from exc


def _build_catalog_or_raise(app_config: AppConfig) -> Catalog:
    try:
        return app_config.catalog()
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="config") from exc


def _check_category_or_raise(catalog: Catalog, category: str | None) -> None:
    if category is None:
        return
    try:
        catalog.checks(category)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--category") from exc


def _format_or_raise(value: str) -> str:
    output_format = value.lower()
    if output_format not in {"human", "json"}:
        raise typer.BadParameter("format must be one of: human, json", param_hint="--format")
    return output_format
