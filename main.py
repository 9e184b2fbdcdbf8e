"""Example bot: a few commands wired through the Switchyard dispatcher.

Run with ``BOT_TOKEN=... python main.py``.  Handlers are registered in
priority order: the update logger first (it always calls ``next``), then the
commands, then the plain-text fallback.
"""

import asyncio

from bot import Bot, BotOptions
from config import BOT_TOKEN
from core.incoming import IncomingUpdate
from core.logger import SwitchyardLogger

logger = SwitchyardLogger.get_logger()

# ── Command definitions (name → description) used by /help ───────────────────
COMMANDS: dict[str, str] = {
    "start": "Say hello",
    "help": "Show available commands",
    "echo": "Repeat the text after the command",
}


async def reply(bot: Bot, info: IncomingUpdate, text: str) -> None:
    """Send *text* to the chat the update came from."""
    chat = info.chat or info.channel
    await asyncio.to_thread(bot.client.send_message, chat.id, text)


def register_handlers(bot: Bot) -> Bot:
    """Attach the example handlers to *bot* and return it."""

    @bot.use()
    def log_update(info, next):
        logger.info("Update received", extra={"update_id": info.id, "kind": info.kind.value, "queued": info.queued})
        return next()

    @bot.command("start")
    async def handle_start(info, next):
        name = info.msg.from_user.first_name if info.msg.from_user else "there"
        await reply(bot, info, f"Hello, {name}! Send /help to see what I can do.")

    @bot.command("help")
    async def handle_help(info, next):
        lines = [f"/{name} — {description}" for name, description in COMMANDS.items()]
        await reply(bot, info, "\n".join(lines))

    @bot.command("echo")
    async def handle_echo(info, next):
        await reply(bot, info, info.command.payload or "Usage: /echo <text>")

    @bot.command()
    async def handle_unknown_command(info, next):
        await reply(bot, info, f"Unknown command /{info.command.name}. Try /help.")

    @bot.on_callback_query()
    async def handle_callback(info, next):
        await asyncio.to_thread(bot.client.answer_callback_query, info.query.id)

    @bot.on_text()
    def handle_text(info, next):
        logger.debug("Ignoring plain text", extra={"update_id": info.id, "chat_id": info.chat.id})

    bot.on_event("error", lambda exc, info: logger.error(
        "Handler error", extra={"update_id": info.id, "error": str(exc)},
    ))
    bot.on_event("sync", lambda: logger.info("Backlog processed, now live"))
    return bot


def main() -> None:
    if not BOT_TOKEN:
        raise EnvironmentError("BOT_TOKEN environment variable is not set or is empty.")

    bot = register_handlers(Bot(BOT_TOKEN, BotOptions.from_config()))
    logger.info("Switchyard example bot is running. Polling for updates...")
    try:
        asyncio.run(bot.run_forever())
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")


if __name__ == "__main__":
    main()
