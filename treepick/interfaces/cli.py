"""treepick CLI: download selected files of a GitHub repository."""

from __future__ import annotations

import asyncio

import click

from ..models import ClientConfig, SyncOptions
from .api import TreePicker


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("descriptor")
@click.argument("patterns", nargs=-1)
@click.option("--output-dir", "-o", type=click.Path(file_okay=False), default=".",
              show_default=True, help="Directory the files are written to.")
@click.option("--force", "-f", is_flag=True, default=False,
              help="Overwrite files that already exist.")
@click.option("--dry-run", "-n", is_flag=True, default=False,
              help="Only list what would be downloaded.")
@click.option("--verbose", "-v", is_flag=True, default=False,
              help="List matched and ignored files.")
@click.option("--branch", "-b", default=None,
              help="Branch to download from (overrides the descriptor's ref).")
@click.option("--tag", "-t", default=None,
              help="Tag to download from (overrides --branch).")
@click.option("--top-level-dot", "-d", "top_level_dot_files", is_flag=True, default=False,
              help="Also select dotfiles at the repository root when patterns are given.")
@click.option("--apply-manifest-ignores", is_flag=True, default=False,
              help="Drop files matching the ignore globs declared in package.json.")
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), default=30.0,
              show_default=True, help="HTTP timeout in seconds.")
@click.option("--max-concurrent", type=click.IntRange(min=1), default=None,
              help="Limit the number of simultaneous downloads.")
@click.pass_context
def main(ctx, descriptor, patterns, output_dir, force, dry_run, verbose, branch, tag,
         top_level_dot_files, apply_manifest_ignores, timeout, max_concurrent):
    """Download files of DESCRIPTOR matching the glob PATTERNS.

    DESCRIPTOR has the form [server:]owner/repo[/ref]. Without PATTERNS
    every file of the repository is selected.
    """
    config = ClientConfig(timeout=timeout, max_concurrent_downloads=max_concurrent)
    options = SyncOptions(
        output_dir=output_dir,
        force=force,
        dry_run=dry_run,
        verbose=verbose,
        branch=branch,
        tag=tag,
        top_level_dot_files=top_level_dot_files,
        glob_patterns=list(patterns),
        apply_manifest_ignores=apply_manifest_ignores,
    )

    picker = TreePicker(config=config, verbose=verbose)
    result = asyncio.run(picker.run(descriptor, options))

    if not result.is_successful:
        ctx.exit(1)
