# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fusebroker/cli/app.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import typer
import yaml

from fusebroker.broker.errors import BrokerError, ProvisioningError
from fusebroker.broker.models import ContextProfile, LastOperationResponse, OperationState, UserInfo
from fusebroker.broker.poller import wait_for_operation
from fusebroker.config.loader import config_from_env, load_config
from fusebroker.config.models import BrokerConfig
from fusebroker.fuse.deployer import DEPLOY, REMOVE, FuseDeployer
from fusebroker.k8s.client import ClusterClient
from fusebroker.logging.log import init_logging
from fusebroker.observers.logger import LoggerObserver
from fusebroker.utils.serialize import to_jsonable


# ------------------------------------------------------------------------------
# CLI setup
# ------------------------------------------------------------------------------

app = typer.Typer(help="Fuse managed-service deployer CLI")

DEPLOYER_ID = "fuse-deployer"


def _resolve_config(config: Optional[Path]) -> BrokerConfig:
    if config is None:
        return config_from_env()
    return load_config(config)


def _build(
    config: Optional[Path],
    context: Optional[str],
    debug: bool,
) -> Tuple[FuseDeployer, ClusterClient]:
    cfg = _resolve_config(config)
    logger, run_id, log_path = init_logging(
        base_dir=cfg.logging.dir,
        keep_runs=cfg.logging.keep_runs,
        verbose=debug,
    )
    deployer = FuseDeployer(DEPLOYER_ID, cfg, observers=[LoggerObserver(logger)])
    cluster = ClusterClient.from_kubeconfig(context or cfg.kube_context)
    return deployer, cluster


def parse_params(items: List[str]) -> Dict[str, Any]:
    """
    Turn ``key=value`` pairs into a parameter dict.

    Values are read as YAML scalars so ``limit=5`` arrives as a number.
    """
    params: Dict[str, Any] = {}
    for item in items:
        if "=" not in item:
            raise typer.BadParameter(f"expected key=value, got {item!r}")
        key, raw = item.split("=", 1)
        params[key.strip()] = yaml.safe_load(raw) if raw else None
    return params


def _echo_json(obj: Any) -> None:
    typer.echo(json.dumps(to_jsonable(obj), indent=2, sort_keys=True))


def _echo_status(resp: LastOperationResponse) -> None:
    color = {
        OperationState.SUCCEEDED: "green",
        OperationState.IN_PROGRESS: "yellow",
        OperationState.FAILED: "red",
    }[resp.state]
    typer.secho(f"{resp.state.value}: {resp.description}", fg=color)
    if resp.cause is not None:
        typer.echo(f"  cause: {resp.cause}")


# ------------------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------------------

@app.command()
def catalog(
    config: Optional[Path] = typer.Option(None, "--config", help="Broker config YAML"),
):
    """Print the service catalog entries."""
    deployer = FuseDeployer(DEPLOYER_ID, _resolve_config(config))
    _echo_json(deployer.get_catalog_entries())


@app.command()
def deploy(
    instance_id: str = typer.Argument(..., help="Service instance id"),
    user: str = typer.Option(..., "--user", help="Requesting user name"),
    user_namespace: str = typer.Option(..., "--user-namespace", help="Namespace of the requesting user"),
    broker_namespace: str = typer.Option("managed-services-broker", "--broker-namespace"),
    param: Optional[List[str]] = typer.Option(None, "--param", "-p", help="Provisioning parameter key=value"),
    config: Optional[Path] = typer.Option(None, "--config", help="Broker config YAML"),
    context: Optional[str] = typer.Option(None, "--context"),
    debug: bool = typer.Option(False, "--debug"),
):
    """Provision a Fuse instance."""
    params = parse_params(param or [])
    deployer, cluster = _build(config, context, debug)

    try:
        resp = deployer.deploy(
            instance_id,
            broker_namespace,
            ContextProfile(namespace=user_namespace),
            params,
            UserInfo(username=user),
            cluster,
        )
    except ProvisioningError as e:
        typer.secho(f"[{e.response.code}] {e}", fg="red")
        raise typer.Exit(code=1)

    _echo_json(resp)


@app.command()
def remove(
    instance_id: str = typer.Argument(..., help="Service instance id"),
    config: Optional[Path] = typer.Option(None, "--config", help="Broker config YAML"),
    context: Optional[str] = typer.Option(None, "--context"),
    debug: bool = typer.Option(False, "--debug"),
):
    """Delete a Fuse instance namespace."""
    deployer, cluster = _build(config, context, debug)
    try:
        deployer.remove_deploy(instance_id, deployer.namespace(instance_id), cluster)
    except BrokerError as e:
        typer.secho(str(e), fg="red")
        raise typer.Exit(code=1)
    typer.secho(f"removal of {deployer.namespace(instance_id)} requested", fg="green")


@app.command("last-operation")
def last_operation(
    instance_id: str = typer.Argument(..., help="Service instance id"),
    operation: str = typer.Option(DEPLOY, "--operation", help=f"{DEPLOY} or {REMOVE}"),
    wait: bool = typer.Option(False, "--wait", help="Poll until the operation finishes"),
    interval: float = typer.Option(5.0, "--interval"),
    timeout: float = typer.Option(600.0, "--timeout"),
    config: Optional[Path] = typer.Option(None, "--config", help="Broker config YAML"),
    context: Optional[str] = typer.Option(None, "--context"),
    debug: bool = typer.Option(False, "--debug"),
):
    """Report the state of the last deploy/remove operation."""
    deployer, cluster = _build(config, context, debug)

    def poll() -> LastOperationResponse:
        return deployer.last_operation(instance_id, cluster, operation)

    if wait:
        try:
            resp = wait_for_operation(
                poll,
                interval_seconds=interval,
                timeout_seconds=timeout,
                on_poll=_echo_status,
            )
        except TimeoutError as e:
            typer.secho(str(e), fg="red")
            raise typer.Exit(code=2)
    else:
        resp = poll()
        _echo_status(resp)

    if resp.state is OperationState.FAILED:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
