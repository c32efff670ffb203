# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""fedstore CLI — inspect the configured store."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import click
from rich.pretty import Pretty

from fedstore.cli.console import console
from fedstore.config.properties.mongodb import MongoDBProperties
from fedstore.core.config import Config
from fedstore.kernel.exceptions import FedStoreException
from fedstore.logging.port import LoggingPort
from fedstore.logging.structlog_adapter import StructlogAdapter
from fedstore.store.connection import build_connection_uri, mask_uri, validate_properties
from fedstore.store.factory import create_store
from fedstore.store.record import LegacyRecord


# Builds the logging backend the group configures.
logging_port_factory: Callable[[], LoggingPort] = StructlogAdapter


def _configure_logging(config: Config) -> LoggingPort:
    port = logging_port_factory()
    port.configure(config)
    port.get_logger(__name__).debug("Loaded configuration from %s", ", ".join(config.loaded_sources))
    return port


@contextmanager
def _store_errors() -> Iterator[None]:
    try:
        yield
    except FedStoreException as exc:
        raise click.ClickException(str(exc)) from exc


@contextmanager
def _open_store(config: Config) -> Iterator[Any]:
    with _store_errors():
        store = create_store(config)
        try:
            yield store
        finally:
            store.close()


@click.group()
@click.version_option(package_name="fedstore")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default="fedstore.yaml",
    show_default=True,
    help="YAML or TOML configuration file.",
)
@click.option("--profile", "profiles", multiple=True, help="Profile overlay to apply (repeatable).")
@click.pass_context
def cli(ctx: click.Context, config_path: Path, profiles: tuple[str, ...]) -> None:
    """fedstore — MongoDB session store for identity-federation hosts."""
    config = Config.from_file(config_path, active_profiles=list(profiles))
    _configure_logging(config)
    ctx.obj = config


@cli.command("uri")
@click.pass_obj
def uri_command(config: Config) -> None:
    """Print the connection URI with the password masked."""
    with _store_errors():
        props = config.bind(MongoDBProperties)
        validate_properties(props)
        uri = build_connection_uri(props)
    console.print(mask_uri(uri), markup=False, highlight=False)


@cli.command("get")
@click.argument("type_", metavar="TYPE")
@click.argument("key")
@click.pass_obj
def get_command(config: Config, type_: str, key: str) -> None:
    """Show the record stored under TYPE/KEY."""
    with _open_store(config) as store:
        result = store.lookup(type_, key)

    if result is None:
        console.print(f"[warning]Not found:[/warning] {type_}/{key}")
        return
    if isinstance(result, LegacyRecord):
        console.print("[dim]legacy record without payload[/dim]")
        console.print(Pretty(result.fields))
        return
    console.print(Pretty(result.value))


@cli.command("delete")
@click.argument("type_", metavar="TYPE")
@click.argument("key")
@click.pass_obj
def delete_command(config: Config, type_: str, key: str) -> None:
    """Delete the record stored under TYPE/KEY."""
    with _open_store(config) as store:
        store.delete(type_, key)
    console.print(f"[success]Deleted[/success] {type_}/{key}")

