"""Reply texts and inline keyboards for the to-do bot."""

from __future__ import annotations

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from src.core.callbacks import encode_mark_done
from src.core.parser import FailureKind
from src.data.models import TodoItem

BUTTON_LABEL_CHARS = 30

DO_USAGE = (
    "Usage: /do @username text\n"
    "Example: /do @hesong07 add to the he table\n"
    "Or: /do @boewu28 task name, goal description\n"
    "Or: /do me task name, goal description (self-assign)"
)
DO_MENTION_REQUIRED = (
    "Please mention a username starting with @\n"
    "Example: /do @hesong07 your task here\n"
    "Or use: /do me your task here (self-assign)"
)
TASK_TEXT_REQUIRED = (
    "Please provide task text\n"
    "Example: /do @hesong07 add to the he table\n"
    "Or: /he add to my table"
)


def shortcut_usage(alias: str) -> str:
    return (
        f"Usage: /{alias} task name, goal description\n"
        f"Example: /{alias} add to the {alias} table, finish by Friday"
    )


def target_usage(command: str, aliases: list[str]) -> str:
    lines = [f"Usage: /{command} [@username]"]
    lines += [f"Or: /{command} {alias}" for alias in aliases]
    lines.append(f"Or: /{command} (for your own list)")
    return "\n".join(lines)


def do_failure_message(kind: FailureKind) -> str:
    if kind is FailureKind.MALFORMED_INPUT:
        return DO_MENTION_REQUIRED
    if kind is FailureKind.MISSING_TEXT:
        return TASK_TEXT_REQUIRED
    return DO_USAGE


def error_message(text: str) -> str:
    return f"❌ {text}"


def format_added(username: str, purpose: str, goal: str) -> str:
    msg = f"✅ Added {purpose}"
    if goal:
        msg += f" for {goal}"
    return msg + f" to @{username}'s todo list"


def no_pending(username: str) -> str:
    return f"📋 No pending tasks for @{username}"


def _todo_lines(todos: list[TodoItem]) -> list[str]:
    lines = []
    for number, todo in enumerate(todos, start=1):
        if todo.goal:
            lines.append(f"{number}. {todo.purpose} ({todo.goal})")
        else:
            lines.append(f"{number}. {todo.purpose}")
    return lines


def format_todo_list(username: str, todos: list[TodoItem]) -> str:
    """Numbered newest-first list, or the no-pending-tasks message."""
    if not todos:
        return no_pending(username)
    return f"📋 Tasks for @{username}:\n\n" + "\n".join(_todo_lines(todos))


def format_selection(todos: list[TodoItem]) -> str:
    return "Select a task to mark as done:\n\n" + "\n".join(_todo_lines(todos))


def button_label(number: int, todo: TodoItem) -> str:
    purpose = todo.purpose
    if len(purpose) > BUTTON_LABEL_CHARS:
        purpose = purpose[:BUTTON_LABEL_CHARS] + "..."
    return f"{number}. {purpose}"


def show_list_keyboard(username: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        [[InlineKeyboardButton("Mark as done", callback_data=encode_mark_done(username))]]
    )


def selection_keyboard(username: str, todos: list[TodoItem]) -> InlineKeyboardMarkup:
    keyboard = [
        [InlineKeyboardButton(
            button_label(number, todo),
            callback_data=encode_mark_done(username, todo.row_number),
        )]
        for number, todo in enumerate(todos, start=1)
    ]
    return InlineKeyboardMarkup(keyboard)
