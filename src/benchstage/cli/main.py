"""CLI entry point for benchstage.

Commands are registered on a LazyGroup so ``benchstage --help`` does not
import the generators, pyarrow or Faker.
"""

from __future__ import annotations

import importlib
from typing import Any

import click
import rich_click as rclick

from benchstage import __version__
from benchstage.cli.output import set_no_color

rclick.rich_click.TEXT_MARKUP = "markdown"
rclick.rich_click.SHOW_ARGUMENTS = True
rclick.rich_click.GROUP_ARGUMENTS_OPTIONS = True


class LazyGroup(rclick.RichGroup):
    """Click group that imports command modules only when invoked.

    Attributes:
        lazy_subcommands: Mapping of command names to ``module.attribute`` paths.
    """

    def __init__(
        self,
        *args: Any,
        lazy_subcommands: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.lazy_subcommands: dict[str, str] = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        commands = set(super().list_commands(ctx))
        commands.update(self.lazy_subcommands.keys())
        return sorted(commands)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        cmd = super().get_command(ctx, cmd_name)  # type: ignore[arg-type]
        if cmd is not None:
            return cmd

        if cmd_name not in self.lazy_subcommands:
            return None

        module_name, attr_name = self.lazy_subcommands[cmd_name].rsplit(".", 1)
        mod = importlib.import_module(module_name)
        return getattr(mod, attr_name)  # type: ignore[no-any-return]


LAZY_COMMANDS = {
    "datasets": "benchstage.cli.commands.datasets.datasets",
    "stage": "benchstage.cli.commands.stage.stage",
    "stage-all": "benchstage.cli.commands.stage.stage_all",
    "status": "benchstage.cli.commands.status.status",
    "delete": "benchstage.cli.commands.status.delete",
}


@click.command(cls=LazyGroup, lazy_subcommands=LAZY_COMMANDS)
@click.version_option(version=__version__, prog_name="benchstage")
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output.",
    is_eager=True,
    expose_value=False,
    callback=lambda ctx, param, value: set_no_color(value) if value else None,
)
def cli() -> None:
    """benchstage - Deterministic synthetic benchmark datasets.

    Generate datasets from a fixed seed and stage them as NDJSON in local
    or S3-compatible storage.

    **Getting Started:**

    - `benchstage datasets` - List available datasets
    - `benchstage stage clickbench 1mb` - Stage a dataset
    - `benchstage status clickbench 1mb` - Show staged files
    - `benchstage stage-all 10mb` - Stage every dataset

    Storage settings are read from `BENCHSTAGE_*` environment variables
    unless overridden with `--storage`, `--root` and `--prefix`.
    """
    pass


if __name__ == "__main__":
    cli()
