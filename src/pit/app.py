"""Typer application and CLI entry point for pit.

Commands::

    pit get NAME [-r KEY[=PROMPT]]...   print a profile, completing it in $EDITOR
    pit set NAME KEY=VALUE...           replace a profile
    pit list                            list profile names in the active file
    pit path                            show the files pit uses

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``.
"""

from __future__ import annotations

import logging
import signal
import sys
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional

import typer

from pit import __version__
from pit.exit_codes import EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="pit",
    help="Per-user store of named credential profiles.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"pit {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    root: Optional[str] = typer.Option(
        None, "--root", help="Root directory (default: ~/.pit)."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~pit.output.OutputManager`, applies the
    ``--root`` override and enables debug logging for ``--verbose``.
    """
    from pit.layout import set_root
    from pit.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet))

    if root is not None:
        set_root(root)

    if verbose:
        _enable_debug_logging()


def _enable_debug_logging() -> None:
    """Send ``pit.*`` debug records to stderr."""
    logger = logging.getLogger("pit")
    logger.setLevel(logging.DEBUG)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[debug] %(name)s: %(message)s"))
        logger.addHandler(handler)


@contextmanager
def _handle_errors() -> Iterator[None]:
    """Translate library errors into a message on stderr and an exit code."""
    from pit.exceptions import NoChangesError, PitError
    from pit.output import error, warning

    try:
        yield
    except NoChangesError as exc:
        warning(str(exc))
        raise typer.Exit(code=exc.exit_code)
    except PitError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)
    except OSError as exc:
        error(str(exc))
        raise typer.Exit(code=EXIT_GENERIC_FAILURE)


def _split_pair(raw: str, sep: str = "=") -> tuple[str, Optional[str]]:
    key, found, value = raw.partition(sep)
    if not key:
        raise typer.BadParameter(f"Missing key in {raw!r}")
    return key, (value if found else None)


@app.command("get")
def get_command(
    name: str = typer.Argument(help="Profile name, e.g. a host name."),
    require: Optional[List[str]] = typer.Option(
        None,
        "--require",
        "-r",
        help="Required key, optionally with a prompt: KEY or KEY=PROMPT. Repeatable.",
    ),
) -> None:
    """Print a profile, opening $EDITOR to fill in missing required keys.

    Example::

        pit get example.com -r "username=your login" -r password
    """
    from pit.api import Pit
    from pit.output import get_output

    requires = {}
    for raw in require or []:
        key, prompt = _split_pair(raw)
        requires[key] = prompt if prompt is not None else key

    with _handle_errors():
        profile = Pit().get(name, requires)
    get_output().print_profile(profile, title=name)


@app.command("set")
def set_command(
    name: str = typer.Argument(help="Profile name, e.g. a host name."),
    pairs: Optional[List[str]] = typer.Argument(
        None, help="KEY=VALUE entries. The profile is replaced, not merged."
    ),
) -> None:
    """Replace a profile with the given KEY=VALUE entries.

    Example::

        pit set example.com username=me password=secret
    """
    from pit.api import Pit
    from pit.output import success

    data = {}
    for raw in pairs or []:
        key, value = _split_pair(raw)
        if value is None:
            raise typer.BadParameter(f"Expected KEY=VALUE, got {raw!r}")
        data[key] = value

    with _handle_errors():
        Pit().set(name, data)
    success(f"Saved profile '{name}'.")


@app.command("list")
def list_command() -> None:
    """List the profile names stored in the active profile file."""
    from pit.api import Pit
    from pit.output import get_output

    with _handle_errors():
        names = Pit().store().names()
    get_output().print_list(names)


@app.command("path")
def path_command() -> None:
    """Show the root directory, config file and active profile file."""
    from pit.api import Pit
    from pit.output import get_output

    with _handle_errors():
        pit = Pit()
        layout = pit.layout
        store = pit.store()
    output = get_output()
    output.print_profile(
        {
            "root": str(layout.root),
            "config": str(layout.config_file_path()),
            "profiles": str(store.path),
        },
        title="paths",
    )


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``pit`` console script.

    Unhandled :class:`~pit.exceptions.PitError` instances cause a clean exit
    with the error's ``exit_code``.
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from pit.exceptions import PitError
        from pit.output import error

        if isinstance(exc, PitError):
            error(str(exc))
            sys.exit(exc.exit_code)
        raise
