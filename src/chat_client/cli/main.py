"""
Terminal front end: `chat-client` command.

Commands inside the chat:
  /attach PATH   select an image or audio file for preview
  /record        start recording audio
  /stop          stop recording and put it in preview
  /send          send the previewed attachment or recording
  /discard       drop the previewed attachment
  /quit          leave
Anything else is sent as a text message.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

import click
from rich.console import Console
from rich.markup import escape

from chat_client.app import ChatContext, create_context, lifespan
from chat_client.application.exceptions import (
    AttachmentError,
    CaptureUnsupported,
    ConnectionFailed,
)
from chat_client.config import Settings, settings
from chat_client.domain.entities.message import Message
from chat_client.domain.entities.payload import Payload
from chat_client.domain.value_objects.enums import PayloadKind, SubscribeMode
from chat_client.infrastructure.files.attachment_reader import read_attachment
from chat_client.services.identity_service import resolve_identities
from chat_client.services.payload_codec import media_bytes

console = Console()


def describe(payload: Payload) -> str:
    if payload.kind is PayloadKind.TEXT:
        return escape(payload.raw)
    return f"[magenta]\\[{payload.kind} {len(media_bytes(payload))} bytes][/magenta]"


def render(message: Message) -> None:
    if message.is_own:
        who = "[blue]Me[/blue]"
    else:
        who = f"[green]{escape(message.sender)}[/green]"
    console.print(f"[dim]{message.display_time}[/dim] {who}: {describe(message.content)}")


def _prompter(*preset: Optional[str]) -> Callable[[str], str]:
    queued = list(preset)

    def prompt(label: str) -> str:
        if queued:
            value = queued.pop(0)
            if value is not None:
                return value
        return click.prompt(label, default="", show_default=False)

    return prompt


def _report(problem: str) -> None:
    console.print(f"[red]{escape(problem)}[/red]")


async def _handle(context: ChatContext, line: str) -> bool:
    """Run one input line. Returns False when the user quits."""
    command, _, argument = line.partition(" ")
    if command in ("/quit", "/exit"):
        return False
    if command == "/attach":
        try:
            attachment = read_attachment(argument.strip())
        except AttachmentError as exc:
            _report(exc.detail)
            return True
        payload = context.composer.attach(attachment.media_kind, attachment.data, attachment.mime)
        if payload is not None:
            console.print(f"[yellow]Preview:[/yellow] {describe(payload)} (/send or /discard)")
    elif command == "/record":
        try:
            await context.recorder.start()
        except CaptureUnsupported as exc:
            _report(exc.detail)
            return True
        console.print("[red]Recording...[/red] (/stop to finish)")
    elif command == "/stop":
        elapsed = context.recorder.elapsed_seconds
        payload = await context.recorder.stop()
        if payload is not None:
            console.print(f"[yellow]Preview:[/yellow] {describe(payload)} {elapsed}s (/send)")
    elif command == "/discard":
        context.composer.discard()
    else:
        try:
            if command == "/send":
                await context.channel.send_preview()
            else:
                await context.channel.send_text(line)
        except ConnectionFailed as exc:
            _report(exc.detail)
    return True


async def _chat(context: ChatContext) -> None:
    async with lifespan(context):
        remove = context.log.add_listener(render)
        console.print(
            f"[cyan]Chatting as {escape(context.channel.identity)} with "
            f"{escape(context.channel.peer)} (Ctrl+C to exit)[/cyan]"
        )
        try:
            while True:
                line = await asyncio.to_thread(
                    click.prompt, "", default="", show_default=False, prompt_suffix="> ",
                )
                if not await _handle(context, line):
                    break
        except (EOFError, click.Abort):
            pass
        finally:
            remove()


@click.command()
@click.version_option("0.1.0")
@click.option("--name", default=None, help="Your participant name.")
@click.option("--peer", default=None, help="Name of the participant to chat with.")
@click.option("--broker", default=None, help="Broker URL (overrides BROKER_URL).")
@click.option("--room", default=None, help="Topic namespace (overrides CHAT_ROOM).")
@click.option(
    "--mode",
    type=click.Choice([m.value for m in SubscribeMode]),
    default=None,
    help="Subscribe to the whole room or only to the peer's topic.",
)
def main(
    name: Optional[str],
    peer: Optional[str],
    broker: Optional[str],
    room: Optional[str],
    mode: Optional[str],
):
    """Two-party chat over a pub/sub broker."""
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    overrides = {
        key: value
        for key, value in (("BROKER_URL", broker), ("CHAT_ROOM", room), ("SUBSCRIBE_MODE", mode))
        if value is not None
    }
    try:
        config = Settings(**overrides)
    except ValueError as exc:
        raise click.BadParameter(str(exc))

    identity, other = resolve_identities(_prompter(name, peer), _report)
    context = create_context(identity, other, config=config)
    try:
        asyncio.run(_chat(context))
    except ConnectionFailed as exc:
        _report(exc.detail)
        raise SystemExit(1)
    except KeyboardInterrupt:
        console.print("[dim]Bye[/dim]")


if __name__ == "__main__":
    main()
