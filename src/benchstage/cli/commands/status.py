"""benchstage status / delete commands - Inspect and remove staged data."""

from __future__ import annotations

import click

from benchstage.cli.errors import handle_staging_errors
from benchstage.cli.options import storage_options
from benchstage.cli.output import print_json, success
from benchstage.pipeline import StagingPipeline


@click.command()
@click.argument("dataset")
@click.argument("size", default="10mb")
@storage_options
def status(dataset: str, size: str, pipeline: StagingPipeline) -> None:
    """Show what is staged for DATASET at SIZE.

    Examples:

        benchstage status imdb 1mb
    """
    with handle_staging_errors():
        report = pipeline.status(dataset, size)
    print_json(report)


@click.command()
@click.argument("dataset")
@click.argument("size", default="10mb")
@click.option("--yes", is_flag=True, default=False, help="Do not ask for confirmation")
@storage_options
def delete(dataset: str, size: str, yes: bool, pipeline: StagingPipeline) -> None:
    """Delete everything staged for DATASET at SIZE.

    Examples:

        benchstage delete clickbench 1mb --yes
    """
    if not yes:
        click.confirm(f"Delete all staged files for {dataset}/{size}?", abort=True)
    with handle_staging_errors():
        result = pipeline.delete(dataset, size)
    success(f"Deleted {result.deleted} files")
    print_json(result)
