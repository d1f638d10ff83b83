"""Click-based CLI for ACA - Agent Config Adapter sync."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click
import httpx
import yaml
from pydantic import ValidationError

from aca import __version__
from aca.config import (
    API_KEY_PREFIX,
    DEFAULT_SERVER_URL,
    AcaConfig,
    config_exists,
    get_config_path,
    load_config,
    resolve_server_url,
    save_config,
    update_last_sync,
    validate_config_file,
)
from aca.config.defaults import PROFILE_PATH
from aca.models import parse_types
from aca.output import Console, create_console
from aca.remote import ApiClient, ApiError, LocalBackend, SyncBackend
from aca.scan import ScanRoot, default_roots, scan_root
from aca.store import DirectoryStore, StoreError
from aca.sync.driver import SyncDriver
from aca.sync.engine import ReconciliationEngine
from aca.sync.service import SyncRequestError, SyncService
from aca.utils.paths import expand_path


@click.group()
@click.version_option(version=__version__, prog_name="aca")
def cli() -> None:
    """ACA - Agent Config Adapter sync for Claude Code.

    Push local commands, agents and skills to your config server.

    \b
    Global:  ~/.claude/{commands,agents,skills}
    Project: ./.claude/{commands,agents,skills}
    """
    pass


def _load_config() -> AcaConfig:
    """Load configuration or exit with an error."""
    try:
        return load_config()
    except (yaml.YAMLError, ValidationError, OSError) as e:
        create_console().print_error(f"Cannot load configuration {get_config_path()}: {e}")
        sys.exit(1)


def _console_for(config: AcaConfig, verbose: bool = False) -> Console:
    """Create a console honoring the output settings of the configuration."""
    return create_console(verbose=verbose or config.output.verbose, colored=config.output.colored)


def _select_roots(console: Console, use_global: bool, use_project: bool) -> list[ScanRoot]:
    """Resolve scan roots or exit if none were requested."""
    if not use_global and not use_project:
        console.print_error("Specify at least one of --global or --project")
        console.print_info("  aca sync --global            Sync from ~/.claude/")
        console.print_info("  aca sync --project           Sync from ./.claude/")
        console.print_info("  aca sync --global --project  Sync both")
        sys.exit(1)
    return default_roots(use_global=use_global, use_project=use_project)


def _build_backend(
    console: Console,
    config: AcaConfig,
    server: Optional[str],
    store: Optional[Path],
) -> SyncBackend:
    """
    Pick the sync backend.

    An offline store (--store or store_path) wins over the server.

    Args:
        console: Output console.
        config: Loaded configuration.
        server: --server override.
        store: --store override.

    Returns:
        Backend ready for a sync driver.
    """
    store_dir = store or (Path(config.store_path) if config.store_path else None)
    if store_dir is not None:
        store_dir = expand_path(store_dir)
        console.print_info(f"Store: {store_dir} (owner: {config.owner_id})")
        directory_store = DirectoryStore(store_dir)
        engine = ReconciliationEngine(directory_store, directory_store)
        return LocalBackend(SyncService(engine), owner_id=config.owner_id)

    if not config.api_key:
        console.print_error('Not authenticated. Run "aca login" first.')
        sys.exit(1)

    server_url = resolve_server_url(server, config)
    console.print_info(f"Server: {server_url}")
    return ApiClient(server_url, config.api_key, timeout=config.timeout)


@cli.command()
@click.option("--global", "use_global", is_flag=True, help="Sync from ~/.claude/ (global artifacts)")
@click.option("--project", "use_project", is_flag=True, help="Sync from ./.claude/ (project artifacts)")
@click.option("--dry-run", "-n", is_flag=True, help="Preview changes without applying")
@click.option("--types", "types_csv", help="Filter artifact types (comma-separated: command,agent,skill,mcp_config)")
@click.option("--delete", "allow_delete", is_flag=True, help="Offer to delete remote artifacts with no local match")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
@click.option("--server", help="Override server URL")
@click.option(
    "--store",
    type=click.Path(file_okay=False, path_type=Path),
    help="Sync into a local directory store instead of the server",
)
def sync(
    use_global: bool,
    use_project: bool,
    dry_run: bool,
    types_csv: Optional[str],
    allow_delete: bool,
    verbose: bool,
    server: Optional[str],
    store: Optional[Path],
) -> None:
    """Synchronize local artifacts to the server.

    Always previews first. Changes are applied only after confirmation;
    remote artifacts without a local match are deleted only with --delete
    and a second confirmation.

    \b
    Examples:
        aca sync --global --dry-run
        aca sync --project --types command,skill
        aca sync --global --project --delete
    """
    config = _load_config()
    console = _console_for(config, verbose)
    roots = _select_roots(console, use_global, use_project)

    types = None
    if types_csv:
        try:
            types = parse_types(types_csv)
        except ValueError as e:
            console.print_error(str(e))
            sys.exit(1)

    backend = _build_backend(console, config, server, store)

    try:
        outcome = SyncDriver(backend, console).run(roots, types, dry_run=dry_run, allow_delete=allow_delete)
    except ApiError as e:
        if e.is_auth_error:
            console.print_error('Authentication failed. Run "aca login" to re-authenticate.')
        else:
            console.print_error(f"Server error ({e.status}): {e.message}")
        sys.exit(1)
    except httpx.HTTPError as e:
        console.print_error(f"Cannot reach server: {e}")
        sys.exit(1)
    except (StoreError, SyncRequestError) as e:
        console.print_error(str(e))
        sys.exit(1)
    finally:
        if isinstance(backend, ApiClient):
            backend.close()

    if outcome.applied:
        update_last_sync()


@cli.command()
@click.option("--global", "use_global", is_flag=True, help="Scan ~/.claude/")
@click.option("--project", "use_project", is_flag=True, help="Scan ./.claude/")
@click.option("--verbose", "-v", is_flag=True, help="Show every warning")
def scan(use_global: bool, use_project: bool, verbose: bool) -> None:
    """List the artifacts a sync would send.

    Read-only: nothing is sent to the server.

    \b
    Examples:
        aca scan --global
        aca scan --project --verbose
    """
    console = _console_for(_load_config(), verbose)
    roots = _select_roots(console, use_global, use_project)

    total = 0
    for root in roots:
        result = scan_root(root.path)
        total += len(result.records)
        console.print_scanned(result.records, root.label)
        console.print_scan_warnings(result.warnings, root.scope)

        counts = result.count_by_type()
        if counts:
            parts = [f"{count} {artifact_type.value}" for artifact_type, count in counts.items()]
            console.print(f"  [dim]{', '.join(parts)}[/dim]")

    console.print()
    console.print_info(f"{total} artifact(s) found")


@cli.command()
@click.option("--server", help="Server URL")
def login(server: Optional[str]) -> None:
    """Authenticate with the server.

    Opens the server's profile page, where you can create an API key,
    then validates the pasted key and saves it.
    """
    config = _load_config()
    console = _console_for(config)

    console.print("\n[bold]ACA Login[/bold]")

    if server:
        server_url = server
    elif config_exists():
        server_url = config.server_url
    else:
        server_url = click.prompt("Server URL", default=DEFAULT_SERVER_URL)
    server_url = server_url.strip().rstrip("/")
    if not server_url.startswith(("http://", "https://")):
        console.print_error(f"Invalid server URL: {server_url}")
        sys.exit(1)
    console.print_info(f"Server: {server_url}")

    profile_url = f"{server_url}{PROFILE_PATH}"
    console.print_info(f"Opening browser to {profile_url}")
    console.print_info("Create or copy an API key from your profile page.")
    if click.launch(profile_url) != 0:
        console.print_warning(f"Could not open browser. Open manually: {profile_url}")

    api_key = click.prompt("Paste your API key", hide_input=True).strip()
    if not api_key.startswith(API_KEY_PREFIX):
        console.print_error(f'Invalid API key. Keys must start with "{API_KEY_PREFIX}".')
        sys.exit(1)

    console.print_info("Validating API key...")
    with ApiClient(server_url, api_key, timeout=config.timeout) as client:
        valid = client.validate()

    if not valid:
        console.print_error("API key validation failed. Check your key and server URL.")
        sys.exit(1)

    path = save_config(config.model_copy(update={"server_url": server_url, "api_key": api_key}))

    console.print_success(f"Authenticated! Config saved to {path}")


@cli.command()
def status() -> None:
    """Show authentication and sync status.

    Validates the stored API key against the server.
    """
    config = _load_config()
    console = _console_for(config)
    config_path = get_config_path()

    if not config_exists():
        console.print_warning(f"No config file found at {config_path}")
        console.print_info('Run "aca login" to configure.')
        return

    console.print_status(config, str(config_path))

    if not config.api_key:
        console.print_warning('No API key configured. Run "aca login" to authenticate.')
        return

    console.print_info("Validating API key...")
    with ApiClient(config.server_url, config.api_key, timeout=config.timeout) as client:
        valid = client.validate()

    if valid:
        console.print_success("API key is valid")
    else:
        console.print_error('API key is invalid or expired. Run "aca login" to re-authenticate.')


@cli.group()
def config() -> None:
    """Manage the aca configuration file.

    \b
    Location: ~/.config/aca/config.yaml (override with ACA_CONFIG)
    """
    pass


@config.command("show")
def config_show() -> None:
    """Show the effective configuration (API key masked)."""
    cfg = _load_config()
    console = _console_for(cfg)

    data = cfg.model_dump(exclude_none=True, mode="json")
    if cfg.api_key:
        data["api_key"] = cfg.masked_api_key

    source = str(get_config_path()) if config_exists() else "defaults (no config file)"
    console.print(f"[dim]# {source}[/dim]")
    console.print(yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True), markup=False)


@config.command("validate")
@click.argument("file", required=False, type=click.Path(dir_okay=False, path_type=Path))
def config_validate(file: Optional[Path]) -> None:
    """Validate a configuration file.

    Defaults to the active configuration file.
    """
    console = create_console()
    path = file or get_config_path()

    valid, errors = validate_config_file(path)
    if not valid:
        console.print_error(f"Invalid configuration: {path}")
        for error in errors:
            console.print(f"  • {error}", markup=False)
        sys.exit(1)

    console.print_success(f"Configuration is valid: {path}")

