"""Options shared by commands that talk to storage."""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

import click

from benchstage.config import StagingSettings
from benchstage.observability import configure_logging
from benchstage.pipeline import StagingPipeline
from benchstage.storage import create_storage

F = TypeVar("F", bound=Callable[..., Any])


def storage_options(func: F) -> F:
    """Add --storage/--root/--prefix/--workers/--log-level and inject ``pipeline``.

    Unset options fall back to ``BENCHSTAGE_*`` environment settings.
    """

    @click.option(
        "--storage",
        "storage_backend",
        type=click.Choice(["memory", "local", "s3"]),
        default=None,
        help="Storage backend [default: BENCHSTAGE_STORAGE_BACKEND or local]",
    )
    @click.option(
        "--root",
        "storage_root",
        default=None,
        help="Local directory or s3 bucket[/path] to stage into",
    )
    @click.option("--prefix", "key_prefix", default=None, help="Key prefix inside the root")
    @click.option(
        "--workers",
        "max_workers",
        type=click.IntRange(1, 64),
        default=None,
        help="Tables generated concurrently within a dependency level",
    )
    @click.option(
        "--log-level",
        type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
        default=None,
        help="Log level for structured logs on stderr",
    )
    @wraps(func)
    def wrapper(
        *args: Any,
        storage_backend: str | None,
        storage_root: str | None,
        key_prefix: str | None,
        max_workers: int | None,
        log_level: str | None,
        **kwargs: Any,
    ) -> Any:
        overrides = {
            "storage_backend": storage_backend,
            "storage_root": storage_root,
            "key_prefix": key_prefix,
            "max_workers": max_workers,
            "log_level": log_level,
        }
        settings = StagingSettings(**{k: v for k, v in overrides.items() if v is not None})
        configure_logging(log_level=settings.log_level, json_format=settings.json_logs)
        pipeline = StagingPipeline(create_storage(settings), settings=settings)
        return func(*args, pipeline=pipeline, **kwargs)

    return wrapper  # type: ignore[return-value]
