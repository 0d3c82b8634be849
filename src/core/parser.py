"""
Sheet To-Do Bot — Command Parser.

Turns the text of one command message into structured arguments. Nothing
here talks to Telegram or the spreadsheet; a missing or unusable argument is
returned as a ParseFailure, not raised, so handlers can answer with a usage
message.
"""

from __future__ import annotations

import logging
import re
from enum import Enum

from pydantic import BaseModel

logger = logging.getLogger(__name__)

_MENTION_RE = re.compile(r"^@(\w+)")
_TARGET_RE = re.compile(r"^@?(\w+)")
_SELF_PREFIX = "me "


class FailureKind(str, Enum):
    INSUFFICIENT_INPUT = "insufficient_input"
    MALFORMED_INPUT = "malformed_input"
    # a target was given but no task text follows it
    MISSING_TEXT = "missing_text"


class ParseFailure(BaseModel):
    """Input could not be turned into a command."""
    kind: FailureKind


class ParsedTodo(BaseModel):
    """Task text split into the Purpose and Goal columns."""
    purpose: str
    goal: str = ""


class AssignArgs(BaseModel):
    """Arguments of /do.

    target is None for the self-assign form ("/do me ...").
    """
    target: str | None = None
    text: str

    @property
    def self_assign(self) -> bool:
        return self.target is None


class TargetArgs(BaseModel):
    """Arguments of /list and /done. target is None means "the caller"."""
    target: str | None = None


def strip_command(text: str | None, command: str) -> str:
    """Remove a leading /command (optionally /command@botname) and whitespace."""
    pattern = rf"^/{re.escape(command)}(@\w+)?(?=\s|$)"
    return re.sub(pattern, "", (text or "").strip(), count=1, flags=re.IGNORECASE).strip()


def split_purpose_goal(text: str) -> ParsedTodo:
    """Split "purpose, goal" on the first comma; later commas stay in the goal.

    >>> split_purpose_goal("Buy milk, by Friday")
    ParsedTodo(purpose='Buy milk', goal='by Friday')
    """
    if "," not in text:
        return ParsedTodo(purpose=text.strip())
    parts = [p.strip() for p in text.split(",")]
    return ParsedTodo(purpose=parts[0], goal=",".join(parts[1:]).strip())


def parse_assign(args: str) -> AssignArgs | ParseFailure:
    """Parse the argument text of /do.

    Accepted forms: "me <text>" and "@username <text>".
    """
    if args.lower().startswith(_SELF_PREFIX):
        text = args[len(_SELF_PREFIX):].strip()
        if not text:
            return ParseFailure(kind=FailureKind.MISSING_TEXT)
        return AssignArgs(target=None, text=text)

    if not args:
        return ParseFailure(kind=FailureKind.INSUFFICIENT_INPUT)

    match = _MENTION_RE.match(args)
    if not match:
        return ParseFailure(kind=FailureKind.MALFORMED_INPUT)

    text = args[match.end():].strip()
    if not text:
        return ParseFailure(kind=FailureKind.MISSING_TEXT)
    return AssignArgs(target=match.group(1), text=text)


def parse_target(args: str) -> TargetArgs | ParseFailure:
    """Parse the optional username/alias argument of /list and /done."""
    if not args:
        return TargetArgs(target=None)
    match = _TARGET_RE.match(args)
    if not match:
        return ParseFailure(kind=FailureKind.MALFORMED_INPUT)
    return TargetArgs(target=match.group(1))
