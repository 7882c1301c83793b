from __future__ import annotations

import logging

import typer
from dotenv import load_dotenv

from formbuild.config import ConfigError, Settings

logger = logging.getLogger("formbuild")

cli = typer.Typer(add_completion=False)


def load_settings() -> Settings:
    load_dotenv(".env")
    try:
        return Settings()
    except ConfigError as exc:
        logging.basicConfig(level=logging.ERROR)
        logger.error("Invalid configuration: %s", exc)
        raise typer.Exit(code=1) from exc


def run_server(host: str | None, port: int | None) -> None:
    import uvicorn

    from formbuild.app import create_app

    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    resolved_host = host or settings.host
    resolved_port = port if port is not None else settings.port

    logger.info("service running in %s:%s", resolved_host, resolved_port)
    uvicorn.run(
        create_app(settings),
        host=resolved_host,
        port=resolved_port,
        log_level=settings.log_level,
        timeout_graceful_shutdown=settings.shutdown_timeout,
    )
    logger.info("server shut down")


@cli.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    host: str | None = typer.Option(None, help="Address to bind"),
    port: int | None = typer.Option(None, help="Port to bind"),
) -> None:
    ctx.obj = {"host": host, "port": port}
    if ctx.invoked_subcommand is None:
        run_server(host, port)


@cli.command()
def run(
    ctx: typer.Context,
    host: str | None = typer.Option(None, help="Address to bind"),
    port: int | None = typer.Option(None, help="Port to bind"),
) -> None:
    base = ctx.obj or {}
    resolved_host = host or base.get("host")
    resolved_port = port if port is not None else base.get("port")
    run_server(resolved_host, resolved_port)
