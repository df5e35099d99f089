import os
import json
import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

if os.environ.get("DEBUG", "0") == "1":
    logging.getLogger().setLevel(logging.DEBUG)

from config import (
    create_api_adapter, create_settings_store, create_tracker, load_config,
    normalize_api_url,
)
from domain.errors import JobClientError
from domain.models import SubmissionOptions
from use_cases.submit_job import SubmissionClient

app = typer.Typer(help="Submit briefing analysis jobs and follow them until they finish.")
config_app = typer.Typer(help="Show or change the backend API URL.")
app.add_typer(config_app, name="config")


def _run(coro_fn) -> None:
    try:
        asyncio.run(coro_fn())
    except JobClientError as e:
        logger.error(f"{type(e).__name__}: {e}")
        raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    api_url: Optional[str] = typer.Option(None, "--api-url", help="Backend base URL (overrides saved setting and env)."),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging."),
):
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
    ctx.obj = {"api_url": api_url}


@app.command()
def submit(
    ctx: typer.Context,
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="Video file to upload."),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Video URL to analyze."),
    full_analysis: bool = typer.Option(False, "--full-analysis", help="Request the language-model pass."),
    narrative_length: Optional[int] = typer.Option(None, "--narrative-length", help="Narrative length (with --full-analysis)."),
    fast: bool = typer.Option(False, "--fast", help="Skip optional enrichment steps."),
    wait: bool = typer.Option(True, "--wait/--no-wait", help="Follow the job until it finishes."),
):
    """Create a job from a file or URL."""
    options = SubmissionOptions(
        full_analysis=full_analysis,
        narrative_length=narrative_length,
        fast_mode=fast,
    )

    async def _submit():
        cfg = load_config(api_url=ctx.obj["api_url"])
        api = create_api_adapter(cfg)
        if not wait:
            job_id = await SubmissionClient(api).submit(file=file, url=url, options=options)
            typer.echo(str(job_id))
            return

        tracker = create_tracker(cfg, api)
        job_id = await tracker.submit_and_track(file=file, url=url, options=options)
        typer.echo(f"Job {job_id} submitted, waiting for it to finish")
        result_id = await tracker.wait_for_result()
        if result_id:
            typer.echo(result_id)

    _run(_submit)


@app.command()
def status(
    ctx: typer.Context,
    job_id: str = typer.Argument(..., help="Job identifier."),
    wait: bool = typer.Option(False, "--wait/--no-wait", help="Follow the job until it finishes."),
):
    """Show the status of a job."""

    async def _status():
        cfg = load_config(api_url=ctx.obj["api_url"])
        api = create_api_adapter(cfg)
        if not wait:
            snapshot = await api.get_job(job_id)
            line = f"{snapshot.job_id} {snapshot.status.value} {snapshot.progress:g}%"
            if snapshot.result_id:
                line += f" briefing={snapshot.result_id}"
            if snapshot.error:
                line += f" error={snapshot.error}"
            typer.echo(line)
            return

        tracker = create_tracker(cfg, api)
        tracker.track(job_id)
        result_id = await tracker.wait_for_result()
        if result_id:
            typer.echo(result_id)

    _run(_status)


@app.command()
def health(ctx: typer.Context):
    """Probe the backend."""
    result = {}

    async def _health():
        cfg = load_config(api_url=ctx.obj["api_url"])
        result["health"] = await create_api_adapter(cfg).health()

    _run(_health)
    typer.echo(f"{result['health'].status} {result['health'].timestamp}")
    if result["health"].status == "unknown":
        raise typer.Exit(code=1)


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Print the resolved configuration."""
    try:
        cfg = load_config(api_url=ctx.obj["api_url"])
    except JobClientError as e:
        logger.error(str(e))
        raise typer.Exit(code=1)
    typer.echo(json.dumps(cfg.as_dict(), indent=2))


@config_app.command("set-url")
def config_set_url(
    url: str = typer.Argument(..., help="Backend base URL to save."),
    check: bool = typer.Option(True, "--check/--no-check", help="Probe the URL before saving."),
):
    """Save a backend base URL for later runs."""
    result = {}

    async def _check():
        result["url"] = normalize_api_url(url)
        if check:
            cfg = load_config(api_url=result["url"])
            probe = await create_api_adapter(cfg).health()
            if probe.status == "unknown":
                raise JobClientError(f"Backend at {result['url']} did not answer the health check")

    _run(_check)
    store = create_settings_store()
    store.set_api_url(result["url"])
    typer.echo(f"API URL saved: {result['url']}")


@config_app.command("reset-url")
def config_reset_url():
    """Forget the saved backend base URL."""
    create_settings_store().clear_api_url()
    typer.echo("API URL reset to default")


if __name__ == "__main__":
    app()
