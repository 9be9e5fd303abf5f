"""benchstage stage / stage-all commands - Generate and persist datasets."""

from __future__ import annotations

import click

from benchstage.cli.errors import EXIT_SYSTEM_ERROR, handle_staging_errors
from benchstage.cli.options import storage_options
from benchstage.cli.output import print_json, success, warning
from benchstage.pipeline import StagingPipeline


@click.command()
@click.argument("dataset")
@click.argument("size", default="10mb")
@storage_options
def stage(dataset: str, size: str, pipeline: StagingPipeline) -> None:
    """Stage DATASET at SIZE (1mb, 10mb, 100mb, 1gb; default 10mb).

    Returns the existing files without regenerating when the dataset is
    already staged at that size.

    Examples:

        benchstage stage clickbench 1mb

        benchstage stage imdb 100mb --storage s3 --root my-bucket/bench
    """
    with handle_staging_errors():
        manifest = pipeline.stage(dataset, size)

    if manifest.cached:
        success(f"{dataset}/{size} already staged")
    else:
        success(f"Staged {dataset}/{size} ({len(manifest.files)} tables in {manifest.duration_ms} ms)")
    print_json(manifest)


@click.command("stage-all")
@click.argument("size", default="10mb")
@click.option(
    "-d",
    "--dataset",
    "datasets",
    multiple=True,
    help="Dataset to include (repeatable) [default: all]",
)
@storage_options
def stage_all(size: str, datasets: tuple[str, ...], pipeline: StagingPipeline) -> None:
    """Stage every dataset (or the selected ones) at SIZE.

    Failed datasets are reported and the command exits 2, after the
    remaining datasets have been staged.

    Examples:

        benchstage stage-all 1mb

        benchstage stage-all 10mb -d clickbench -d imdb
    """
    with handle_staging_errors():
        summary = pipeline.stage_all(size, list(datasets) or None)

    for dataset, message in summary.errors.items():
        warning(f"{dataset}: {message}")
    print_json(summary)
    if summary.failed:
        raise SystemExit(EXIT_SYSTEM_ERROR)
