"""CLI error handling for benchstage.

Maps pipeline exceptions to user-facing messages and exit codes:
invalid requests exit 1, storage failures exit 2.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import click

from benchstage.cli import output
from benchstage.errors import (
    CatalogError,
    InvalidDatasetError,
    InvalidSizeTierError,
    StorageReadError,
    StorageWriteError,
)

# Exit codes following sysexits.h convention
EXIT_SUCCESS = 0
EXIT_USER_ERROR = 1  # Invalid dataset or size
EXIT_SYSTEM_ERROR = 2  # Storage failure


class CLIError(click.ClickException):
    """CLI-specific exception with exit code support.

    Attributes:
        message: User-facing error message.
        exit_code: Exit code for the CLI (default: 1).
    """

    def __init__(self, message: str, exit_code: int = EXIT_USER_ERROR) -> None:
        super().__init__(message)
        self.exit_code = exit_code

    def show(self, file: object = None) -> None:
        """Display the error message using Rich formatting."""
        output.error(self.format_message())


@contextmanager
def handle_staging_errors() -> Iterator[None]:
    """Translate staging exceptions raised inside the block into CLIError.

    Example:
        >>> with handle_staging_errors():
        ...     pipeline.stage(dataset, size)
    """
    try:
        yield
    except (InvalidDatasetError, InvalidSizeTierError) as exc:
        raise CLIError(exc.message, exit_code=EXIT_USER_ERROR) from exc
    except CatalogError as exc:
        raise CLIError(str(exc), exit_code=EXIT_USER_ERROR) from exc
    except (StorageReadError, StorageWriteError) as exc:
        raise CLIError(str(exc), exit_code=EXIT_SYSTEM_ERROR) from exc
    except OSError as exc:
        raise CLIError(f"Storage error: {exc}", exit_code=EXIT_SYSTEM_ERROR) from exc
