"""
Sheet To-Do Bot — Telegram Bot.

Telegram is the only user interface. Every command resolves a registered
person, locates their table on the leftmost sheet and reads or writes rows.

Every failure is caught at the handler boundary and answered in the chat;
only startup configuration errors stop the process.
"""

from __future__ import annotations

import logging
import sys
from functools import wraps
from typing import TYPE_CHECKING, Any, Callable, Coroutine

from telegram import Update
from telegram.error import TelegramError
from telegram.ext import (
    Application,
    ApplicationBuilder,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
)

from src.bot import messages
from src.config import apply_log_level, get_settings
from src.core.callbacks import MARK_DONE_PATTERN, decode_mark_done
from src.core.errors import ConfigError, TodoBotError, UnknownIdentityError
from src.core.locator import TableLocator
from src.core.parser import (
    ParseFailure,
    parse_assign,
    parse_target,
    split_purpose_goal,
    strip_command,
)
from src.core.registry import Registry
from src.core.todo_service import TodoService
from src.ports.sheet_port import SheetError

if TYPE_CHECKING:
    from src.config import Settings
    from src.data.models import Identity
    from src.ports.sheet_port import SheetPort

logger = logging.getLogger(__name__)

Handler = Callable[[Update, ContextTypes.DEFAULT_TYPE], Coroutine[Any, Any, None]]


# ---------------------------------------------------------------------------
# Error boundary
# ---------------------------------------------------------------------------


def reports_errors(fallback: str) -> Callable[[Handler], Handler]:
    """Turn any failure inside a command handler into a chat reply.

    Known errors carry their own user-facing message; anything else is
    logged with its traceback and answered with the fallback text.
    """

    def decorator(func: Handler) -> Handler:
        @wraps(func)
        async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
            try:
                return await func(update, context)
            except (TodoBotError, SheetError) as exc:
                logger.error("%s failed: %s", func.__name__, exc)
                await update.message.reply_text(messages.error_message(str(exc)))
            except Exception:
                logger.exception("%s failed unexpectedly", func.__name__)
                await update.message.reply_text(messages.error_message(fallback))

        return wrapper

    return decorator


def _registry(context: ContextTypes.DEFAULT_TYPE) -> Registry:
    return context.bot_data["registry"]


def _todos(context: ContextTypes.DEFAULT_TYPE) -> TodoService:
    return context.bot_data["todos"]


def _caller_handle(update: Update) -> str | None:
    user = update.effective_user
    return user.username if user else None


# ---------------------------------------------------------------------------
# Adding tasks: /do, /<alias>
# ---------------------------------------------------------------------------


async def _add_todo(
    update: Update, context: ContextTypes.DEFAULT_TYPE, identity: Identity, text: str
) -> None:
    """Shared by /do and the shortcut commands."""
    todo = split_purpose_goal(text)
    if not todo.purpose:
        await update.message.reply_text(messages.TASK_TEXT_REQUIRED)
        return

    await _todos(context).add_todo(identity, todo)
    await update.message.reply_text(
        messages.format_added(identity.username, todo.purpose, todo.goal)
    )


@reports_errors("Failed to add todo. Check logs for details.")
async def cmd_do(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /do @username text and /do me text."""
    args = strip_command(update.message.text, "do")
    parsed = parse_assign(args)
    if isinstance(parsed, ParseFailure):
        await update.message.reply_text(messages.do_failure_message(parsed.kind))
        return

    registry = _registry(context)
    if parsed.self_assign:
        identity = registry.resolve_caller(_caller_handle(update))
    else:
        identity = registry.resolve(parsed.target)

    await _add_todo(update, context, identity, parsed.text)


def make_shortcut_handler(alias: str, identity: Identity) -> Handler:
    """Build the /<alias> handler that adds to one fixed person's table."""

    @reports_errors("Failed to add todo. Check logs for details.")
    async def cmd_shortcut(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        args = strip_command(update.message.text, alias)
        if not args:
            await update.message.reply_text(messages.shortcut_usage(alias))
            return
        await _add_todo(update, context, identity, args)

    cmd_shortcut.__name__ = f"cmd_{alias}"
    return cmd_shortcut


# ---------------------------------------------------------------------------
# Reading and completing tasks: /list, /done
# ---------------------------------------------------------------------------


async def _resolve_target(
    update: Update, context: ContextTypes.DEFAULT_TYPE, command: str
) -> Identity | None:
    """Resolve the optional target argument; None means a usage reply was sent."""
    registry = _registry(context)
    parsed = parse_target(strip_command(update.message.text, command))
    aliases = [alias for alias, _ in registry.alias_commands()]

    if isinstance(parsed, ParseFailure):
        await update.message.reply_text(messages.target_usage(command, aliases))
        return None

    if parsed.target is not None:
        return registry.resolve(parsed.target)

    try:
        return registry.resolve_caller(_caller_handle(update))
    except UnknownIdentityError:
        await update.message.reply_text(messages.target_usage(command, aliases))
        return None


@reports_errors("Failed to list todos. Check logs for details.")
async def cmd_list(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /list [user] — pending tasks, newest first."""
    identity = await _resolve_target(update, context, "list")
    if identity is None:
        return
    todos = await _todos(context).list_todos(identity)
    await update.message.reply_text(messages.format_todo_list(identity.username, todos))


@reports_errors("Failed to list todos. Check logs for details.")
async def cmd_done(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /done [user] — pending tasks with a "Mark as done" button."""
    identity = await _resolve_target(update, context, "done")
    if identity is None:
        return

    todos = await _todos(context).get_todos_with_row_numbers(identity)
    if not todos:
        await update.message.reply_text(messages.no_pending(identity.username))
        return

    await update.message.reply_text(
        messages.format_todo_list(identity.username, todos),
        reply_markup=messages.show_list_keyboard(identity.username),
    )


async def _handle_mark_done_callback(
    update: Update, context: ContextTypes.DEFAULT_TYPE
) -> None:
    """Handle the "Mark as done" button and the per-task buttons it reveals."""
    query = update.callback_query
    payload = decode_mark_done(query.data)
    if payload is None:
        logger.warning("Ignoring malformed callback data: %r", query.data)
        await query.answer()
        return

    try:
        identity = _registry(context).resolve(payload.username)
        todos_service = _todos(context)

        if payload.show_list:
            todos = await todos_service.get_todos_with_row_numbers(identity)
            if not todos:
                await query.answer("No pending tasks to mark as done")
                await query.edit_message_text("📋 No pending tasks to mark as done")
                return
            await query.answer()
            await query.edit_message_text(
                messages.format_selection(todos),
                reply_markup=messages.selection_keyboard(identity.username, todos),
            )
            return

        await todos_service.mark_done(identity, payload.row)
        await query.answer("Task marked as done! ✅")
        await query.edit_message_text("✅ Task marked as done!")

    except Exception:
        logger.exception("mark_done callback failed for %r", query.data)
        try:
            await query.answer("An error occurred")
        except TelegramError as exc:
            logger.error("Could not answer callback query: %s", exc)


# ---------------------------------------------------------------------------
# Info commands
# ---------------------------------------------------------------------------


async def cmd_start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start — welcome message."""
    await update.message.reply_text(
        "Hi! I keep the shared to-do tables in the spreadsheet up to date.\n\n"
        "Type /help for the full command list."
    )


async def cmd_help(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help — list available commands."""
    registry = _registry(context)
    lines = [
        "Available commands:",
        "/do @username task, goal — add a task to someone's table",
        "/do me task, goal — add a task to your own table",
    ]
    for alias, identity in registry.alias_commands():
        lines.append(f"/{alias} task, goal — add a task to @{identity.username}'s table")
    lines += [
        "/list [@username] — show pending tasks",
        "/done [@username] — mark a task as done",
        "/help — show this message",
    ]
    await update.message.reply_text("\n".join(lines))


# ---------------------------------------------------------------------------
# App builder
# ---------------------------------------------------------------------------


def build_app(
    sheets: SheetPort | None = None,
    registry: Registry | None = None,
    settings: Settings | None = None,
    webhook: bool = False,
) -> Application:
    """Build and configure the Telegram Application with all handlers.

    Args:
        sheets: Sheet port implementation. Defaults to GoogleSheetsAdapter,
                built once here from the service-account settings.
        registry: Registered people. Defaults to DEFAULT_IDENTITIES.
        settings: Defaults to the process-wide settings.
        webhook: Build without an Updater; updates are fed in by the webhook.
    """
    settings = settings or get_settings()
    registry = registry or Registry()

    if sheets is None:
        from src.adapters.sheet_factory import create_sheet_adapter
        sheets = create_sheet_adapter(settings)

    builder = ApplicationBuilder().token(settings.TELEGRAM_BOT_TOKEN)
    if webhook:
        builder = builder.updater(None)
    app = builder.build()

    # Store services in bot_data for handler access
    app.bot_data["registry"] = registry
    app.bot_data["todos"] = TodoService(sheets, TableLocator(sheets, registry))

    app.add_handler(CommandHandler("start", cmd_start))
    app.add_handler(CommandHandler("help", cmd_help))
    app.add_handler(CommandHandler("do", cmd_do))
    app.add_handler(CommandHandler("list", cmd_list))
    app.add_handler(CommandHandler("done", cmd_done))
    for alias, identity in registry.alias_commands():
        app.add_handler(CommandHandler(alias, make_shortcut_handler(alias, identity)))
    app.add_handler(CallbackQueryHandler(_handle_mark_done_callback, pattern=MARK_DONE_PATTERN))

    logger.info("Telegram bot application built with %d handlers", len(app.handlers[0]))
    return app


def main() -> None:
    """Entry point: load settings, build the app and start polling."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    try:
        settings = get_settings()
        apply_log_level(settings)
        app = build_app(settings=settings)
    except ConfigError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)

    logger.info("Starting Sheet To-Do bot (polling)...")
    app.run_polling(allowed_updates=Update.ALL_TYPES)


if __name__ == "__main__":
    main()
