"""CLI entry point — command routing via Click."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from pkgorder import __version__
from pkgorder.manifest import ManifestError
from pkgorder.resolver import DependencyResolver, ResolverError


def _load_resolver(filepath: str) -> DependencyResolver:
    """Shared helper: parse manifest → build resolver."""
    if not Path(filepath).exists():
        raise click.BadParameter(f"File not found: {filepath}")
    try:
        return DependencyResolver.from_manifest(filepath)
    except ManifestError as e:
        raise click.ClickException(f"Manifest error: {e}") from e


def _echo_packages(packages: list[str], as_json: bool, empty: str = "(none)") -> None:
    if as_json:
        click.echo(json.dumps(packages))
    elif not packages:
        click.echo(empty)
    else:
        for i, name in enumerate(packages, 1):
            click.echo(f"  {i}. {name}")


# ── Main group ───────────────────────────────────────────────


@click.group()
@click.version_option(__version__, prog_name="pkgorder")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """Package installation order resolver — compute dependency-first install orders."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# ── packages ─────────────────────────────────────────────────


@main.command()
@click.argument("file")
@click.option("--json", "as_json", is_flag=True, help="Print a JSON array.")
def packages(file: str, as_json: bool) -> None:
    """List every package declared or referenced in FILE."""
    resolver = _load_resolver(file)
    names = resolver.package_names()
    if not as_json:
        click.echo(click.style(f"─── {len(names)} package(s) ───", fg="cyan", bold=True))
    _echo_packages(names, as_json)


# ── order ────────────────────────────────────────────────────


@main.command()
@click.argument("file")
@click.argument("package", required=False)
@click.option("--all", "all_packages", is_flag=True, help="Order every package in FILE.")
@click.option("--json", "as_json", is_flag=True, help="Print a JSON array.")
def order(file: str, package: str | None, all_packages: bool, as_json: bool) -> None:
    """Print the installation order for PACKAGE (or --all) in FILE."""
    if all_packages == (package is not None):
        raise click.UsageError("Give exactly one of PACKAGE or --all.")

    resolver = _load_resolver(file)
    try:
        if all_packages:
            result = resolver.installation_order_for_all_packages()
        else:
            result = resolver.installation_order(package)
    except ResolverError as e:
        raise click.ClickException(str(e)) from e

    if not as_json:
        target = "all packages" if all_packages else package
        click.echo(click.style(f"─── Installation order for {target} ───", fg="cyan", bold=True))
    _echo_packages(result, as_json)


# ── to-install ───────────────────────────────────────────────


@main.command("to-install")
@click.argument("file")
@click.argument("new_package")
@click.argument("installed_package")
@click.option("--json", "as_json", is_flag=True, help="Print a JSON array.")
def to_install_cmd(file: str, new_package: str, installed_package: str, as_json: bool) -> None:
    """List what NEW_PACKAGE still needs once INSTALLED_PACKAGE is present."""
    resolver = _load_resolver(file)
    try:
        result = resolver.to_install(new_package, installed_package)
    except ResolverError as e:
        raise click.ClickException(str(e)) from e

    if not as_json:
        click.echo(click.style(
            f"─── To install {new_package} (with {installed_package} installed) ───",
            fg="cyan", bold=True,
        ))
    _echo_packages(result, as_json, empty="✓ Nothing new to install.")


# ── max-deps ─────────────────────────────────────────────────


@main.command("max-deps")
@click.argument("file")
def max_deps(file: str) -> None:
    """Show the package in FILE with the most transitive dependencies."""
    resolver = _load_resolver(file)
    try:
        name = resolver.package_with_max_dependencies()
    except ResolverError as e:
        raise click.ClickException(str(e)) from e

    if name is None:
        click.echo(click.style("⚠ No packages found.", fg="yellow"), err=True)
        return
    count = resolver.dependency_count(name)
    click.echo(f"{name} ({count} transitive dep(s))")


# ── check ────────────────────────────────────────────────────


@main.command()
@click.argument("file")
def check(file: str) -> None:
    """Check FILE for circular dependencies."""
    resolver = _load_resolver(file)
    cycle = resolver.find_cycle()

    if cycle is None:
        click.echo(click.style("✓ No circular dependencies found.", fg="green", bold=True))
    else:
        click.echo(click.style("⚠ Circular dependency found:", fg="red", bold=True))
        click.echo(f"  {' → '.join(cycle)}")
