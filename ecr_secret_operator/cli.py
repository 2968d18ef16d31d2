# ecr_secret_operator/cli.py

"""
Command line entry point for the operator.
"""

import asyncio
import logging
import signal
import sys
from typing import Any

import click
import yaml

from . import __version__
from .api.v1beta1 import crd_manifest
from .aws.ecr import Boto3ECRAuthentication
from .config.base import OperatorSettings
from .config.credentials import load_credentials_file
from .config.errors import ConfigError
from .controllers.manager import ControllerManager
from .controllers.reconciler import Reconciler
from .controllers.renewal import RenewalScanner
from .controllers.store import KubernetesStore
from .core.exceptions import FatalConfigurationError
from .core.logging import setup_logging

logger = logging.getLogger(__name__)


def build_manager(settings: OperatorSettings, store: KubernetesStore) -> ControllerManager:
    """Wire the reconciler, renewal scanner and watches from settings."""
    reconciler = Reconciler(
        store=store,
        source_factory=Boto3ECRAuthentication,
        config_file=settings.config_file,
        max_age=settings.max_age,
    )

    def scanner_factory(queue: asyncio.Queue) -> RenewalScanner:
        return RenewalScanner(
            store=store,
            queue=queue,
            max_age=settings.max_age,
            interval=settings.scan_interval,
            poll_interval=settings.poll_interval,
        )

    return ControllerManager.for_kubernetes(
        store,
        reconciler,
        scanner_factory=scanner_factory,
        queue_size=settings.queue_size,
        workers=settings.workers,
        requeue_delay=settings.requeue_delay,
    )


async def run_operator(settings: OperatorSettings) -> None:
    """Start the store and run the controller manager until signalled."""
    store = KubernetesStore(kubeconfig=settings.kubeconfig)
    store.start()
    manager = build_manager(settings, store)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, manager.stop)

    logger.info(
        f"Starting ecr-secret-operator {__version__} "
        f"(max age {settings.max_age}, config {settings.config_file})"
    )
    await manager.run()


@click.group()
@click.version_option(__version__, prog_name="ecr-secret-operator")
def cli() -> None:
    """ECR pull secret operator."""
    pass


@cli.command()
@click.option("--config-file", help="Path to the AWS credentials TOML file")
@click.option("--max-age", help="Maximum age of a generated secret, e.g. 4h")
@click.option("--kubeconfig", type=click.Path(), help="Path to a kubeconfig file")
@click.option("--workers", type=int, help="Number of reconcile workers")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
)
@click.option("--log-format", type=click.Choice(["text", "json"]))
def run(**options: Any) -> None:
    """Run the operator against the current cluster."""
    overrides = {k: v for k, v in options.items() if v is not None}
    try:
        settings = OperatorSettings(**overrides)
    except ValueError as e:
        click.echo(f"Invalid settings: {e}", err=True)
        sys.exit(2)

    setup_logging(level=settings.log_level, fmt=settings.log_format.value)

    try:
        asyncio.run(run_operator(settings))
    except FatalConfigurationError as e:
        logger.critical(f"Operator stopped: {e}")
        sys.exit(1)


@cli.command()
def crd() -> None:
    """Print the ECRSecret CustomResourceDefinition as YAML."""
    click.echo(yaml.safe_dump(crd_manifest(), sort_keys=False), nl=False)


@cli.command("check-config")
@click.argument("account_id")
@click.option(
    "--config-file",
    default=None,
    help="Path to the AWS credentials TOML file (defaults to the configured one)",
)
def check_config(account_id: str, config_file: str | None) -> None:
    """Check that credentials for ACCOUNT_ID can be loaded."""
    path = config_file or OperatorSettings().config_file
    try:
        credentials = load_credentials_file(path, account_id)
    except ConfigError as e:
        click.echo(f"❌ {e}")
        raise click.Abort() from e

    click.echo(f"✅ Credentials for account {account_id} found in {path}")
    click.echo(f"   Access key: {credentials.access_key_id}")
