"""CLI entry point: cdv2spm.

Usage:
    cdv2spm                          # convert ./plugin.xml
    cdv2spm path/to/plugin.xml       # convert a specific descriptor
    cdv2spm --auto-resolve --force   # resolve pods to Swift packages, no prompts
"""

from __future__ import annotations

import asyncio
import sys

import click

from cdv2spm import __version__
from cdv2spm.core.logging import setup_logging
from cdv2spm.engines.plugin_converter import ConversionOptions, CordovaToSPMConverter


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("plugin_xml", required=False, type=click.Path(dir_okay=False))
@click.option("--force", is_flag=True, help="Overwrite existing files without asking")
@click.option("--dry-run", is_flag=True, help="Show what would change without writing files")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.option("--no-gitignore", is_flag=True, help="Do not update .gitignore")
@click.option("--backup", is_flag=True, help="Back up files before modifying them")
@click.option("--auto-resolve", is_flag=True, help="Resolve CocoaPods dependencies to Swift packages")
@click.option("--remove-podspec", is_flag=True, help="Remove <podspec> blocks from plugin.xml")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    metavar="SECONDS",
    help="Per-dependency resolution timeout (default: $CDV2SPM_RESOLVE_TIMEOUT or 30)",
)
@click.version_option(__version__, "--version", prog_name="cdv2spm")
def main(
    plugin_xml: str | None,
    force: bool,
    dry_run: bool,
    verbose: bool,
    no_gitignore: bool,
    backup: bool,
    auto_resolve: bool,
    remove_podspec: bool,
    timeout: float | None,
) -> None:
    """Convert a Cordova plugin.xml into a Swift Package Manager Package.swift."""
    setup_logging(level="DEBUG" if verbose else None)

    options = ConversionOptions(
        force=force,
        dry_run=dry_run,
        verbose=verbose,
        no_gitignore=no_gitignore,
        backup=backup,
        auto_resolve=auto_resolve,
        remove_podspec=remove_podspec,
        input_path=plugin_xml,
        timeout=timeout,
    )

    ok = asyncio.run(CordovaToSPMConverter(options).convert())
    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
