"""Command-line interface for supload."""

from pathlib import Path
from typing import Optional

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console

from supload import __version__
from supload.config import Config
from supload.config_manager import get_config_path, load_config, save_config
from supload.exceptions import AuthenticationError, ConfigurationError, PreconditionError
from supload.logging_config import setup_logging
from supload.models import RunSummary
from supload.sync_engine import UploadEngine
from supload.transport import DEFAULT_AUTH_URL

app = typer.Typer(
    name="supload",
    help="Upload changed files to Swift-compatible cloud storage.",
    no_args_is_help=True,
    add_completion=False,
)
config_app = typer.Typer(help="Manage saved defaults (auth URL, user).", no_args_is_help=True)
app.add_typer(config_app, name="config")

console = Console()
err_console = Console(stderr=True)

CONFIG_KEYS = ("auth_url", "user")


class Messages:
    # Error messages
    MISSING_PARAMS = "[!] Missing params: {names}"
    CONFIG_LOAD_ERROR = "[!] Error loading configuration: {error}"
    CONFIG_MALFORMED = "[!] Config file {path} is malformed: {error}"
    AUTH_FAILED = "[!] {error}"
    CONTAINER_MISSING = "[!] Container not exist: {container}"
    RUN_ERROR = "[!] {error}"
    INVALID_OPTION = "[!] Invalid option: {error}"

    # Success messages
    CONFIG_SAVED = "Configuration saved to {path}"
    CONFIG_NOT_FOUND = "No configuration file found at {path}"


def success_msg(message: str) -> str:
    """Format success message with consistent styling."""
    return f"[green]{message}[/green]"


def format_summary(summary: RunSummary) -> str:
    """One-line tally of a run."""
    return (
        f"\nUploaded {summary.uploaded} file(s), "
        f"skipped {summary.skipped}, failed {summary.failed}"
    )


def _print_error(message: str) -> None:
    err_console.print(message, style="red", markup=False, highlight=False, soft_wrap=True)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"supload {__version__}")
        raise typer.Exit()


@app.callback()
def cli(
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
) -> None:
    """Upload changed files to Swift-compatible cloud storage."""


def _load_and_configure(
    auth_url: Optional[str],
    user: Optional[str],
    key: Optional[str],
) -> Config:
    """Layer defaults: command line, then environment, then the config file."""
    try:
        config = Config.from_env()
        saved = load_config(get_config_path(config.config_dir)) or {}

        if config.auth.auth_url == DEFAULT_AUTH_URL and saved.get("auth_url"):
            config.auth.auth_url = saved["auth_url"]
        if not config.auth.user and saved.get("user"):
            config.auth.user = saved["user"]

        if auth_url:
            config.auth.auth_url = auth_url
        if user:
            config.auth.user = user
        if key:
            config.auth.key = key
    except (yaml.YAMLError, ValueError, ValidationError) as e:
        _print_error(Messages.CONFIG_LOAD_ERROR.format(error=e))
        raise typer.Exit(1)
    return config


def _validate_configuration(config: Config) -> None:
    """Fail before any network call when credentials are missing."""
    missing = config.missing_credentials()
    if missing:
        _print_error(Messages.MISSING_PARAMS.format(names=", ".join(missing)))
        console.print("Usage: supload upload [-a auth_url] -u <USER> -k <KEY> [-r] [-M] [-q] <dest_dir> <src_path>")
        raise typer.Exit(1)


def _resolve_local_path(src_path: str) -> Path:
    """Absolute source path, with symlinks resolved."""
    return Path(src_path).expanduser().resolve()


def _initialize_sync_engine(config: Config) -> UploadEngine:
    """Initialize the upload engine with the CLI consoles."""
    return UploadEngine(config, console=console, error_console=err_console)


@app.command()
def upload(
    dest_dir: str = typer.Argument(
        help="Destination directory or container in storage (ex. container/dir1/), not a file name"
    ),
    src_path: str = typer.Argument(help="Source file or directory"),
    auth_url: Optional[str] = typer.Option(
        None, "--auth-url", "-a", help=f"Authentication URL (default: {DEFAULT_AUTH_URL})"
    ),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="User name"),
    key: Optional[str] = typer.Option(None, "--key", "-k", help="User password"),
    recursive: bool = typer.Option(False, "--recursive", "-r", help="Recursive upload"),
    no_md5: bool = typer.Option(False, "--no-md5", "-M", help="Disable check upload by md5 sum"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Quiet mode (error output only)"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Request timeout in seconds"),
    insecure: bool = typer.Option(False, "--insecure", help="Do not verify TLS certificates"),
    verbose: bool = typer.Option(False, "--verbose", help="Verbose diagnostic logging"),
) -> None:
    """Upload a file, or a directory with -r, skipping files already stored."""
    config = _load_and_configure(auth_url, user, key)
    _validate_configuration(config)

    try:
        config.transfer.recursive = recursive
        config.transfer.digest_check = not no_md5
        config.transfer.quiet = quiet
        config.transfer.verify_ssl = not insecure
        if timeout is not None:
            config.transfer.timeout = timeout
    except ValidationError as e:
        _print_error(Messages.INVALID_OPTION.format(error=e))
        raise typer.Exit(1)
    config.verbose = verbose or config.verbose

    setup_logging(config.verbose)

    engine = _initialize_sync_engine(config)
    try:
        session = engine.connect()
        summary = engine.run(session, dest_dir, _resolve_local_path(src_path))
    except AuthenticationError as e:
        _print_error(Messages.AUTH_FAILED.format(error=e.message))
        if e.details.get("response"):
            _print_error(e.details["response"])
        raise typer.Exit(1)
    except PreconditionError as e:
        _print_error(Messages.CONTAINER_MISSING.format(container=e.details.get("url", dest_dir)))
        raise typer.Exit(1)
    except ConfigurationError as e:
        _print_error(Messages.RUN_ERROR.format(error=e.message))
        raise typer.Exit(1)
    finally:
        engine.close()

    _display_results(summary, config.transfer.quiet)

    if summary.exit_code:
        raise typer.Exit(summary.exit_code)


def _display_results(summary: RunSummary, quiet: bool) -> None:
    """Display the run tally unless quiet."""
    if quiet:
        return
    style = "red" if summary.failed else "green"
    console.print(format_summary(summary), style=style, markup=False, highlight=False)


@config_app.command("show")
def config_show() -> None:
    """Show saved configuration."""
    config_path = get_config_path()
    try:
        saved = load_config(config_path)
    except yaml.YAMLError as e:
        _print_error(Messages.CONFIG_MALFORMED.format(path=config_path, error=e))
        raise typer.Exit(1)

    if saved is None:
        console.print(Messages.CONFIG_NOT_FOUND.format(path=config_path), markup=False, soft_wrap=True)
        return

    console.print(f"Config file: {config_path}", markup=False, highlight=False, soft_wrap=True)
    for name in CONFIG_KEYS:
        console.print(f"{name}: {saved.get(name) or '(not set)'}", markup=False, highlight=False)


@config_app.command("init")
def config_init() -> None:
    """Interactively save the auth URL and user name."""
    config_path = get_config_path()
    try:
        existing = load_config(config_path) or {}
    except yaml.YAMLError:
        existing = {}

    auth_url = typer.prompt("Auth URL", default=existing.get("auth_url") or DEFAULT_AUTH_URL)
    user = typer.prompt("User", default=existing.get("user") or "", show_default=bool(existing.get("user")))

    config_data = {"auth_url": auth_url.strip()}
    if user.strip():
        config_data["user"] = user.strip()

    save_config(config_path, config_data)
    console.print(success_msg(Messages.CONFIG_SAVED.format(path=config_path)), soft_wrap=True)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
