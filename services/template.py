"""Welcome template engine — placeholder substitution for new members."""
from __future__ import annotations

import re

from telegram import User

from utils.messages import ERROR_MESSAGE_PREFIX, INTRO_MSG

PLACEHOLDERS = ("safeusername", "username", "firstname", "groupname")

# "$$name" is an escaped placeholder, "$name" not preceded by "$" is a real one.
# Both are matched in one left-to-right scan so substituted text is never re-read.
_PLACEHOLDER_PATTERN = re.compile(
    r"\$\$(?P<literal>{names})|(?<!\$)\$(?P<name>{names})".format(names="|".join(PLACEHOLDERS))
)

# CommonMark accepts a backslash escape on any ASCII punctuation character
_MARKDOWN_SPECIAL = re.compile(r"([!-/:-@\[-`{-~])")


def escape_markdown(text: str | None) -> str:
    """Escape user supplied text so it can't inject markup into a message."""
    # Missing values render as "undefined" on purpose: $username documents it
    value = "undefined" if text is None else str(text)
    return _MARKDOWN_SPECIAL.sub(r"\\\1", value)


def _substitute(name: str, member: User, group_name: str) -> str:
    if name == "username":
        return f"@{escape_markdown(member.username)}"
    if name == "firstname":
        return escape_markdown(member.first_name)
    if name == "groupname":
        return escape_markdown(group_name)
    # safeusername
    return f"@{escape_markdown(member.username or member.first_name)}"


def compose_message(template: str, member: User, group_name: str) -> str:
    """Render a welcome template for ``member`` joining ``group_name``."""

    def replace(match: re.Match) -> str:
        literal = match.group("literal")
        if literal:
            return f"${escape_markdown(literal)}"
        return _substitute(match.group("name"), member, group_name)

    return _PLACEHOLDER_PATTERN.sub(replace, template)


def compose_intro_message(owner: User, group_name: str) -> str:
    return compose_message(INTRO_MSG, owner, group_name)


def compose_error_message(text: str) -> str:
    return f"{ERROR_MESSAGE_PREFIX} {text}"
