"""
RimWorld Lazy Installer — CLI entrypoint.

Usage:
    rimworld-lazy-installer --help
    rimworld-lazy-installer --dir ~/RimWorld/Mods list
    rimworld-lazy-installer install rjw
    rimworld-lazy-installer update --changed-log
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from lazy_installer import __version__
from lazy_installer.core.observability.logging_config import resolve_level, setup_logging

_PATH = click.Path(path_type=Path)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="rimworld-lazy-installer")
@click.option("--dir", "-d", "mods_dir", type=_PATH, default=None,
              help="RimWorld mod directory (default: $RLI_MODS_DIR or cwd).")
@click.option("--catalog", "catalog_path", type=_PATH, default=None,
              help="Catalog file (default: $RLI_CATALOG or the bundled catalog).")
@click.option("--state", "state_path", type=_PATH, default=None,
              help="State file (default: $RLI_STATE_FILE or the user config dir).")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(
    ctx: click.Context,
    mods_dir: Path | None,
    catalog_path: Path | None,
    state_path: Path | None,
    verbose: bool,
    quiet: bool,
    debug: bool,
) -> None:
    """Lazy installer and updater for RJW and submods."""
    ctx.ensure_object(dict)
    ctx.obj["mods_dir"] = mods_dir
    ctx.obj["catalog_path"] = catalog_path
    ctx.obj["state_path"] = state_path
    ctx.obj["verbose"] = verbose

    setup_logging(level=resolve_level(debug=debug, verbose=verbose, quiet=quiet))

    if ctx.invoked_subcommand is None:
        _overview(ctx)


def _overview(ctx: click.Context) -> None:
    """Show the persisted state without scanning."""
    from lazy_installer.core.config.loader import (
        load_catalog,
        resolve_mods_dir,
        resolve_state_path,
    )
    from lazy_installer.core.persistence.state_file import load_state
    from lazy_installer.errors import CatalogError

    try:
        catalog = load_catalog(ctx.obj["catalog_path"])
    except CatalogError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    state = load_state(resolve_state_path(ctx.obj["state_path"]))
    mods_dir = resolve_mods_dir(ctx.obj["mods_dir"])
    installable = [m for m in catalog if not state.is_installed(m.remote)]
    _print_mods(state, catalog, installable, mods_dir)


def _print_mods(state, catalog, installable, mods_dir: Path) -> None:
    click.secho("\nLazy Installer and updater for RJW and submods\n", fg="green")
    click.secho("You have installed:\n", fg="green")

    if state.installed:
        for entry in state.installed:
            mod = catalog.by_remote(entry.remote)
            label = mod.display_name if mod else entry.mod
            click.secho(f"\t{label:<50}", fg="green", nl=False)
            click.secho(f" {entry.name:<30}", fg="white", bold=True, nl=False)
            click.secho(f" {entry.dir.replace(str(mods_dir), '[mods]')}", fg="yellow")
    else:
        click.secho("\tNo mods!", fg="red")

    click.secho("\nInstall or update the mods with the ", fg="green", nl=False)
    click.secho("install", fg="white", bold=True, nl=False)
    click.secho(" or ", fg="green", nl=False)
    click.secho("update", fg="white", bold=True, nl=False)
    click.secho(" command.\n", fg="green")

    click.secho("Installable mods:\n", fg="green")
    for mod in installable:
        marker = " (deprecated)" if mod.deprecated else ""
        click.secho(f"\t{mod.display_name + marker:<50}", fg="green", nl=False)
        click.secho(f" {mod.name:<30}", fg="white", bold=True, nl=False)
        click.secho(f" {mod.remote}", fg="yellow")

    if installable:
        click.secho("\n\ti.e. ", fg="green", nl=False)
        click.secho(f"$ rimworld-lazy-installer install {installable[0].name}\n", bold=True)
    else:
        click.echo()


@cli.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--no-save", is_flag=True, help="Don't save the scan result to the state file.")
@click.pass_context
def list_mods(ctx: click.Context, as_json: bool, no_save: bool) -> None:
    """Scan the mod directory and list installed mods."""
    from lazy_installer.core.use_cases.check import run_check

    result = run_check(
        mods_dir=ctx.obj["mods_dir"],
        catalog_path=ctx.obj["catalog_path"],
        state_path=ctx.obj["state_path"],
        save=not no_save,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    assert result.state is not None and result.report is not None
    assert result.catalog is not None and result.mods_dir is not None
    _print_mods(result.state, result.catalog, result.installable, result.mods_dir)

    report = result.report
    if report.new:
        click.secho("Newly discovered:", fg="cyan", bold=True)
        for entry in report.new:
            click.echo(f"   + {entry.name}  ({entry.mod})")
    if report.unknown:
        click.secho("Unknown repositories (not in the catalog):", fg="yellow", bold=True)
        for entry in report.unknown:
            click.echo(f"   ? {entry.name}  → {entry.remote}")
    if report.missing:
        click.secho("Missing (tracked before, not found now):", fg="red", bold=True)
        for entry in report.missing:
            click.echo(f"   ✗ {entry.name}  → {entry.dir}")
    if report.new or report.unknown or report.missing:
        click.echo()


cli.add_command(list_mods, name="check")


@cli.command()
@click.argument("name")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(ctx: click.Context, name: str, as_json: bool) -> None:
    """Install a mod that does not exist yet. This command will not update."""
    from lazy_installer.core.use_cases.install import run_install

    result = run_install(
        name,
        mods_dir=ctx.obj["mods_dir"],
        catalog_path=ctx.obj["catalog_path"],
        state_path=ctx.obj["state_path"],
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    elif result.ok:
        click.secho("Installed ", fg="green", nl=False)
        click.echo(name)
    else:
        click.secho(f"❌ {result.error}", fg="red")

    if not result.ok:
        sys.exit(1)


@cli.command()
@click.option("--log", "show_log", is_flag=True, help="Show the last 5 commits of every mod.")
@click.option("--changed-log", "show_only_changed_log", is_flag=True,
              help="Show the last 5 commits of mods that changed.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def update(ctx: click.Context, show_log: bool, show_only_changed_log: bool, as_json: bool) -> None:
    """Update installed mods. This command will not install new mods."""
    from lazy_installer.core.use_cases.update import run_update

    result = run_update(
        state_path=ctx.obj["state_path"],
        show_log=show_log,
        show_only_changed_log=show_only_changed_log,
    )
    report = result.report
    assert report is not None

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if report.failed:
            sys.exit(1)
        return

    if not report.outcomes:
        click.secho("No mods installed — run `list` in your mod directory first.", fg="yellow")
        return

    for outcome in report.outcomes:
        if outcome.status == "updated":
            click.secho("- Updated ", fg="green", nl=False)
            click.echo(outcome.name)
        elif outcome.status == "up_to_date":
            click.secho("- Up to date ", fg="green", nl=False)
            click.echo(outcome.name)
        else:
            click.secho(
                f"Failed to update {outcome.name}, please check the git repo at {outcome.dir}",
                fg="red",
            )
            if ctx.obj.get("verbose") and outcome.error:
                for line in outcome.error.split("\n")[:5]:
                    click.echo(f"     │ {line}")
        for entry in outcome.log:
            click.secho(f"     {entry.hash}", fg="yellow", nl=False)
            click.echo(f"  {entry.message[:70]}")

    click.echo()
    if report.failed:
        click.secho(f"{report.total - report.failed}/{report.total} mods updated", fg="yellow")
        sys.exit(1)
    click.secho("All Mods updated!", fg="green", bold=True)


@cli.command()
@click.argument("name")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def uninstall(ctx: click.Context, name: str, as_json: bool) -> None:
    """Remove an installed mod's checkout."""
    from lazy_installer.core.use_cases.uninstall import run_uninstall

    result = run_uninstall(
        name,
        catalog_path=ctx.obj["catalog_path"],
        state_path=ctx.obj["state_path"],
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    elif result.ok:
        click.secho("Uninstalled ", fg="green", nl=False)
        click.echo(name)
    else:
        click.secho(f"❌ {result.error}", fg="red")
        if result.manual_commands:
            click.echo("   Remove it manually with:")
            for command in result.manual_commands:
                click.secho(f"     {command}", bold=True)

    if not result.ok:
        sys.exit(1)


@cli.command()
@click.pass_context
def debug(ctx: click.Context) -> None:
    """Dump the persisted state."""
    from lazy_installer.core.config.loader import resolve_state_path
    from lazy_installer.core.persistence.state_file import load_state

    path = resolve_state_path(ctx.obj["state_path"])
    click.echo(f"# {path}", err=True)
    click.echo(json.dumps(load_state(path).to_document(), indent=2))


# ── Catalog ─────────────────────────────────────────────────────────


@cli.group()
def catalog() -> None:
    """Catalog commands — show or refresh the known mods."""


@catalog.command("show")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def catalog_show(ctx: click.Context, as_json: bool) -> None:
    """List every mod in the catalog."""
    from lazy_installer.core.config.loader import load_catalog
    from lazy_installer.errors import CatalogError

    try:
        mods = load_catalog(ctx.obj["catalog_path"])
    except CatalogError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps([m.model_dump(mode="json") for m in mods], indent=2))
        return

    for mod in mods:
        color = "white" if mod.deprecated else "green"
        click.secho(f"  {mod.display_name:<50}", fg=color, nl=False)
        click.secho(f" {mod.name:<30}", bold=True, nl=False)
        click.secho(f" {mod.remote}", fg="yellow")
        notes = ["deprecated"] if mod.deprecated else []
        if mod.remark:
            notes.append(mod.remark)
        if notes:
            click.echo(f"      ({', '.join(notes)})")


@catalog.command("refresh")
@click.option("--url", default=None, help="Masterlist URL.")
@click.option("--output", "-o", type=_PATH, default=None,
              help="Where to write the merged catalog (default: the catalog file).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def catalog_refresh(ctx: click.Context, url: str | None, output: Path | None, as_json: bool) -> None:
    """Merge the provider masterlist into the catalog."""
    from lazy_installer.core.services.catalog_sync import MASTERLIST_URL
    from lazy_installer.core.use_cases.catalog_refresh import run_catalog_refresh

    result = run_catalog_refresh(
        catalog_path=ctx.obj["catalog_path"],
        output=output,
        url=url or MASTERLIST_URL,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    elif result.error:
        click.secho(f"❌ {result.error}", fg="red")
    else:
        assert result.merge is not None
        for name in result.merge.updated:
            click.echo(f"\t{name} updated")
        for name in result.merge.added:
            click.secho(f"\t{name} added", fg="green")
        click.secho(f"\nFinished — catalog written to {result.output}\n", fg="green")

    if result.error:
        sys.exit(1)


if __name__ == "__main__":
    cli()
