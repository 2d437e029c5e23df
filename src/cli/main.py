"""CLI `agxcl` (Typer).

Estado:
- Sin estado global: el callback construye un `CliState` (consola, settings,
  ruta del config) por invocación y lo guarda en el contexto.
- Los tests inyectan el suyo con `obj=CliState(...)`.

Nota:
- Todo `AgxclError` que llega a un comando se imprime como `❌ ...` y sale
  con código 1.
"""

from __future__ import annotations

import asyncio
import json
import logging
import platform
import sys
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Awaitable, Callable, Iterator, List, Optional, TypeVar

import typer
from pydantic import JsonValue, ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from adapters.agxcl_client import AgxclClient
from adapters.project_config import find_project_config, load_project_config
from cli.ui_components import (
    build_checks_table,
    build_connectivity_table,
    build_contract_panel,
    print_banner,
    status_cell,
)
from core.config import AppSettings
from core.domain.errors import AgxclError, InvalidPayload
from core.domain.models import NetworkProfile
from core.interfaces.api import ContractApi
from core.services.compiler import compile_contracts, pick_contract, read_contract
from core.services.contract_source import check_contract_structure, extract_contract_name
from core.services.networks import list_networks, resolve_network
from core.services.scaffold import init_project
from core.services.validator import (
    ValidatorHooks,
    check_stake_requirement,
    evaluate_stake,
    probe_endpoints,
)
from core.version import get_version

logger = logging.getLogger(__name__)

T = TypeVar("T")

app = typer.Typer(
    name="agxcl",
    help="AgeFix AGXCL Smart Contract Development CLI",
    no_args_is_help=True,
    add_completion=False,
)


@dataclass
class CliState:
    console: Console = field(default_factory=lambda: Console(soft_wrap=True))
    settings: AppSettings = field(default_factory=AppSettings)
    config_path: Optional[Path] = None

    @property
    def project_dir(self) -> Path:
        return self.config_path.parent if self.config_path else Path.cwd()


def _configure_logging(level: int | str) -> None:
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, show_time=False)],
        force=True,
    )


def _state(ctx: typer.Context) -> CliState:
    return ctx.ensure_object(CliState)


@contextmanager
def _failures(state: CliState, label: str | None = None) -> Iterator[None]:
    """Print any `AgxclError` as a failure and exit with status 1."""

    try:
        yield
    except AgxclError as exc:
        logger.debug("command failed", exc_info=True)
        message = f"{label}: {exc}" if label else str(exc)
        state.console.print(f"[red]❌ {escape(message)}[/red]")
        raise typer.Exit(code=1) from exc


def _run(coro: Awaitable[T]) -> T:
    return asyncio.run(coro)  # type: ignore[arg-type]


async def _with_client(
    profile: NetworkProfile,
    settings: AppSettings,
    operation: Callable[[ContractApi], Awaitable[T]],
) -> T:
    async with AgxclClient.for_profile(profile, settings) as client:
        return await operation(client)


def parse_cli_args(values: List[str] | None) -> list[JsonValue]:
    """Decode `--arg` values as JSON; anything that is not JSON is kept as a string."""

    parsed: list[JsonValue] = []
    for raw in values or []:
        try:
            parsed.append(json.loads(raw))
        except json.JSONDecodeError:
            parsed.append(raw)
    return parsed


def _explicit_profile(endpoint: str) -> NetworkProfile:
    try:
        return NetworkProfile(endpoint=endpoint)
    except ValidationError as exc:
        raise InvalidPayload(f"Invalid endpoint URL: {endpoint}") from exc


def _resolve(state: CliState, network: Optional[str]) -> tuple[str, NetworkProfile]:
    name = network or state.settings.default_network
    config = load_project_config(state.config_path or find_project_config())
    return name, resolve_network(name, config)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to agxcl.config.json."),
) -> None:
    """AgeFix AGXCL Smart Contract Development CLI."""

    if isinstance(ctx.obj, CliState):
        state = ctx.obj
    else:
        try:
            state = CliState()
        except ValidationError as exc:
            first = exc.errors()[0]
            location = ".".join(str(part) for part in first.get("loc", ()))
            message = f"Invalid settings: {location}: {first.get('msg')}"
            Console(soft_wrap=True).print(f"[red]❌ {escape(message)}[/red]")
            raise typer.Exit(code=1) from exc
    if config is not None:
        state.config_path = config
    elif state.config_path is None:
        state.config_path = find_project_config(filename=state.settings.config_filename)
    ctx.obj = state
    _configure_logging(logging.DEBUG if verbose else state.settings.log_level)


@app.command()
def init(ctx: typer.Context, project_name: str = typer.Argument(..., help="Name of the new project.")) -> None:
    """Initialize a new AGXCL project."""

    state = _state(ctx)
    console = state.console
    console.print(f"[blue]🚀 Creating new AGXCL project: {escape(project_name)}[/blue]")
    with _failures(state):
        init_project(project_name, Path.cwd())

    console.print(f"[green]✅ Project {escape(project_name)} created successfully![/green]")
    console.print("[yellow]\nNext steps:[/yellow]")
    console.print(f"  cd {escape(project_name)}")
    console.print("  agxcl compile")
    console.print("  agxcl deploy --network testnet")


@app.command(name="compile")
def compile_command(ctx: typer.Context) -> None:
    """Compile AGXCL smart contracts."""

    state = _state(ctx)
    console = state.console
    console.print("[blue]🔨 Compiling AGXCL contracts...[/blue]")
    with _failures(state):
        summary = compile_contracts(state.project_dir)

    if not summary.contracts:
        console.print("[yellow]⚠️  No .agxcl files found in contracts directory.[/yellow]")
        return
    console.print(f"[green]✅ Compiled {len(summary.contracts)} contract(s) successfully![/green]")
    console.print(f"[cyan]📁 Artifacts saved to: {escape(str(summary.build_dir))}[/cyan]")


@app.command()
def deploy(
    ctx: typer.Context,
    network: Optional[str] = typer.Option(
        None, "--network", "-n", help="Target network (development, testnet, mainnet)."
    ),
    contract: Optional[Path] = typer.Option(None, "--contract", "-c", help="Contract file to deploy."),
    arg: Optional[List[str]] = typer.Option(None, "--arg", help="Constructor argument (JSON), repeatable."),
) -> None:
    """Deploy a contract to the specified network."""

    state = _state(ctx)
    console = state.console
    name = network or state.settings.default_network
    console.print(f"[blue]🚀 Deploying to {escape(name)} network...[/blue]")

    with _failures(state, "Deployment failed"):
        _, profile = _resolve(state, name)
        path = pick_contract(state.project_dir, contract)
        code = read_contract(path)
        problems = check_contract_structure(code)
        if problems:
            raise InvalidPayload(f"{path.name}: {'; '.join(problems)}")
        args = parse_cli_args(arg)
        address = _run(_with_client(profile, state.settings, lambda c: c.deploy_contract(code, args)))

    contract_name = extract_contract_name(code) or path.stem
    console.print(f"[green]✅ Contract {escape(contract_name)} deployed successfully![/green]")
    console.print(f"[cyan]📍 Address: {escape(address)}[/cyan]")
    console.print(f"[cyan]🔗 Network: {escape(name)}[/cyan]")
    console.print(f"[cyan]🌐 Endpoint: {escape(profile.endpoint)}[/cyan]")


@app.command()
def validate(
    ctx: typer.Context,
    network: Optional[List[str]] = typer.Option(
        None, "--network", "-n", help="Networks to probe (default: every configured network)."
    ),
    endpoint: Optional[List[str]] = typer.Option(None, "--endpoint", "-e", help="Extra endpoint URL to probe."),
    address: Optional[str] = typer.Option(None, "--address", "-a", help="Validator address for the stake check."),
) -> None:
    """Validate validator node setup."""

    state = _state(ctx)
    settings = state.settings
    console = state.console
    console.print("[blue]🔍 Validating validator setup...[/blue]")

    table = build_checks_table()
    table.add_row("Python version", status_cell(True), platform.python_version())
    table.add_row("AGXCL CLI version", status_cell(True), get_version())

    failed = False
    with _failures(state):
        endpoints = list(endpoint or [])
        profiles: list[NetworkProfile] = []
        if network or not endpoints:
            config = load_project_config(state.config_path or find_project_config())
            for name in network or list_networks(config):
                profiles.append(resolve_network(name, config))
        endpoints.extend(p.endpoint for p in profiles)

        result = _run(probe_endpoints(endpoints, timeout=settings.probe_timeout_seconds, settings=settings))
        table.add_row(
            "Network connectivity",
            status_cell(result.ok),
            f"{result.reachable_count}/{result.total_count} nodes ({result.percentage:.1f}%)",
        )
        failed = failed or not result.ok

        if address:
            try:
                stake_profile = profiles[0] if profiles else _explicit_profile(endpoints[0])
                stake = _run(_with_client(stake_profile, settings, lambda c: evaluate_stake(c, address)))
            except AgxclError as exc:
                table.add_row("AGX stake", status_cell(False), escape(str(exc)))
                failed = True
            else:
                detail = f"{stake.balance:,} / {stake.required:,} AGX"
                table.add_row("AGX stake", status_cell(stake.sufficient), detail)
                failed = failed or not stake.sufficient

    console.print(table)
    console.print(build_connectivity_table(result))
    if failed:
        raise typer.Exit(code=1)


@app.command()
def status(
    ctx: typer.Context,
    network: Optional[str] = typer.Option(None, "--network", "-n", help="Network to query."),
) -> None:
    """Show the health status of a network endpoint."""

    state = _state(ctx)
    with _failures(state):
        name, profile = _resolve(state, network)
        health = _run(_with_client(profile, state.settings, lambda c: c.get_network_status()))
    state.console.print(f"[green]✅ {escape(name)} ({escape(profile.endpoint)}): {escape(health.status or 'ok')}[/green]")


@app.command()
def balance(
    ctx: typer.Context,
    address: str = typer.Argument(..., help="Wallet address."),
    network: Optional[str] = typer.Option(None, "--network", "-n", help="Network to query."),
) -> None:
    """Show the AGX balance of an address and whether it meets the validator stake."""

    state = _state(ctx)
    console = state.console
    hooks = ValidatorHooks(
        success=lambda m: console.print(f"[green]✅ {escape(m)}[/green]"),
        failure=lambda m: console.print(f"[red]❌ {escape(m)}[/red]"),
    )
    with _failures(state):
        _, profile = _resolve(state, network)
        _run(_with_client(profile, state.settings, lambda c: check_stake_requirement(c, address, hooks)))


@app.command(name="contract-info")
def contract_info(
    ctx: typer.Context,
    address: str = typer.Argument(..., help="Contract address."),
    network: Optional[str] = typer.Option(None, "--network", "-n", help="Network to query."),
) -> None:
    """Fetch information about a deployed contract."""

    state = _state(ctx)
    with _failures(state):
        _, profile = _resolve(state, network)
        record = _run(_with_client(profile, state.settings, lambda c: c.get_contract(address)))
    state.console.print(build_contract_panel(record))


@app.command()
def call(
    ctx: typer.Context,
    address: str = typer.Argument(..., help="Contract address."),
    method: str = typer.Argument(..., help="Contract method to call."),
    arg: Optional[List[str]] = typer.Option(None, "--arg", help="Method argument (JSON), repeatable."),
    network: Optional[str] = typer.Option(None, "--network", "-n", help="Network to query."),
) -> None:
    """Call a method on a deployed contract and print the result as JSON."""

    state = _state(ctx)
    args = parse_cli_args(arg)
    with _failures(state):
        _, profile = _resolve(state, network)
        result: Any = _run(_with_client(profile, state.settings, lambda c: c.call_contract(address, method, args)))
    state.console.print_json(json.dumps(result))


@app.command()
def version(ctx: typer.Context) -> None:
    """Show version information."""

    console = _state(ctx).console
    print_banner(console)
    console.print(f"[cyan]Version: {get_version()}[/cyan]")
    console.print(f"[cyan]Python: {platform.python_version()}[/cyan]")


def run() -> None:
    """Console-script entry point (`agxcl`)."""

    if sys.platform == "win32":
        # cp1252 consoles cannot encode the status emoji.
        for stream in (sys.stdout, sys.stderr):
            stream.reconfigure(encoding="utf-8")
    app(prog_name="agxcl")


__all__ = ["CliState", "app", "parse_cli_args", "run"]
