"""Command line entry point for the group chat client."""

import asyncio
import dataclasses
import sys
from pathlib import Path

import click

from .app import Application
from .config import Settings
from .errors import ChatError, ValidationError
from .logging_config import get_logger, setup_logging
from .models import AttachmentFile, BusMessage, Topic
from .presentation import ChatView
from .transport import HttpMessageTransport

logger = get_logger(__name__)

HELP_TEXT = "Commands: /attach PATH, /clear, /quit. Anything else is sent."


def _load_settings(env: str | None, **overrides) -> Settings:
    settings = Settings.from_env(Path(env) if env else None)
    overrides = {key: value for key, value in overrides.items() if value is not None}
    return dataclasses.replace(settings, **overrides)


@click.group()
def cli():
    """Group chat client."""
    pass


@cli.command()
@click.argument("group_id")
@click.option("--user-id", help="Your user id, used to mark your own messages")
@click.option("--api-url", help="REST base URL, e.g. http://localhost:3000/api")
@click.option("--interval", type=float, help="Seconds between polls")
@click.option("--env", type=click.Path(), help="Path to .env file")
def chat(group_id: str, user_id: str | None, api_url: str | None, interval: float | None, env: str | None):
    """Open GROUP_ID and chat interactively."""
    settings = _load_settings(env, user_id=user_id, api_url=api_url, poll_interval=interval)
    setup_logging(settings.log_level, settings.log_file, console=False)

    try:
        asyncio.run(run_chat(settings, group_id))
    except KeyboardInterrupt:
        click.echo()


@cli.command()
@click.argument("group_id")
@click.option("--limit", type=int, default=None, help="Page size")
@click.option("--skip", type=int, default=0, show_default=True, help="Messages to skip from the newest")
@click.option("--user-id", help="Your user id, used to mark your own messages")
@click.option("--api-url", help="REST base URL")
@click.option("--env", type=click.Path(), help="Path to .env file")
def history(group_id: str, limit: int | None, skip: int, user_id: str | None, api_url: str | None, env: str | None):
    """Print one page of GROUP_ID's history."""
    settings = _load_settings(env, user_id=user_id, api_url=api_url)
    setup_logging(settings.log_level, settings.log_file, console=False)

    try:
        asyncio.run(print_history(settings, group_id, limit or settings.page_limit, skip))
    except ChatError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        raise click.Abort()


async def print_history(settings: Settings, group_id: str, limit: int, skip: int) -> None:
    transport = HttpMessageTransport(
        settings.api_url,
        session_cookie=settings.session_cookie,
        timeout=settings.request_timeout,
    )
    try:
        page = await transport.fetch_page(group_id, limit=limit, skip=skip)
    finally:
        await transport.close()

    view = ChatView(settings.user_id)
    for line in view.render(page.messages):
        click.echo(line)
    if page.total is not None:
        click.secho(f"\n{len(page.messages)} of {page.total} messages", fg="cyan")


async def run_chat(settings: Settings, group_id: str) -> None:
    """Interactive loop: print incoming messages, send typed lines."""
    app = Application(settings)
    await app.start()
    view = ChatView(settings.user_id)
    history_shown = False

    async def on_change(bus_message: BusMessage) -> None:
        nonlocal history_shown
        if history_shown or bus_message.payload.get("group_id") != group_id:
            return
        history_shown = True
        for line in view.render(app.store.messages):
            click.echo(line)

    async def on_scroll(bus_message: BusMessage) -> None:
        for line in view.render_new(app.store.messages):
            click.echo(line)

    app.event_bus.subscribe(Topic.MESSAGES_CHANGED, on_change)
    app.event_bus.subscribe(Topic.SCROLL_REQUESTED, on_scroll)

    try:
        session = await app.open_group(group_id)
        click.secho(view.render([], loading=True)[0], dim=True)
        while session.loading:
            await asyncio.sleep(0.05)
        if session.load_error:
            click.echo(view.render_error(session.load_error))
        click.secho(HELP_TEXT, fg="cyan")

        while True:
            line = await asyncio.to_thread(sys.stdin.readline)
            if not line:
                break
            line = line.rstrip("\n")
            pipeline = session.pipeline

            if line == "/quit":
                break
            if line == "/clear":
                pipeline.clear_attachment()
                continue
            if line.startswith("/attach "):
                path = Path(line[len("/attach "):].strip()).expanduser()
                try:
                    staged = await pipeline.select_attachment(AttachmentFile.from_path(path))
                except ValidationError:
                    click.echo(view.render_error(pipeline.error))
                except OSError as e:
                    click.echo(view.render_error(f"Cannot read {path}: {e}"))
                else:
                    click.echo(view.render_attachment(staged))
                continue

            await pipeline.submit(line)
            if pipeline.error:
                click.echo(view.render_error(pipeline.error))
    finally:
        await app.stop()


def main():
    """Run the CLI."""
    cli()


if __name__ == "__main__":
    main()
