"""benchstage datasets command - List the datasets that can be staged."""

from __future__ import annotations

import click

from benchstage.cli.output import print_datasets, print_json


@click.command()
@click.option("--table", "as_table", is_flag=True, default=False, help="Render as a table instead of JSON")
def datasets(as_table: bool) -> None:
    """List available datasets, their tables and size tiers.

    Examples:

        benchstage datasets

        benchstage datasets --table
    """
    # Deferred so --help does not build the catalog
    from benchstage.catalog import DEFAULT_CATALOG

    described = DEFAULT_CATALOG.describe()
    if as_table:
        print_datasets(described)
    else:
        print_json({"datasets": described})
