"""Markdown → Telegram HTML.

Telegram only understands a handful of inline tags, so block elements are
flattened: paragraphs become blank-line separated text and list items become
dash-prefixed lines.
"""
from __future__ import annotations

import mistune


class TelegramHTMLRenderer(mistune.HTMLRenderer):
    def paragraph(self, text: str) -> str:
        return f"\n\n{text}"

    def heading(self, text: str, level: int, **attrs) -> str:
        return f"\n\n<b>{text}</b>"

    def list(self, text: str, ordered: bool, **attrs) -> str:
        return f"\n{text}"

    def list_item(self, text: str) -> str:
        return f"\n- {text}"

    def block_text(self, text: str) -> str:
        return text

    def block_quote(self, text: str) -> str:
        return f"\n\n<blockquote>{text.strip()}</blockquote>"

    def block_code(self, code: str, info: str | None = None) -> str:
        return f"\n\n<pre>{mistune.escape(code.rstrip())}</pre>"

    def thematic_break(self) -> str:
        return "\n\n———"

    def linebreak(self) -> str:
        return "\n"

    def image(self, text: str, url: str, title: str | None = None) -> str:
        return self.link(text or url, url, title)

    def link(self, text: str, url: str, title: str | None = None) -> str:
        return f'<a href="{self.safe_url(url)}">{text}</a>'

    def strong(self, text: str) -> str:
        return f"<b>{text}</b>"

    def emphasis(self, text: str) -> str:
        return f"<i>{text}</i>"


_markdown = mistune.create_markdown(renderer=TelegramHTMLRenderer(escape=True))


def render_markdown(text: str) -> str:
    """Render the markdown subset used by bot messages as Telegram HTML."""
    return _markdown(text).strip()
