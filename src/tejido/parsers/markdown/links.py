"""Link, image, autolink and emoji parsing.

Link destinations may be angle-bracket delimited or raw with balanced
parentheses. Backslash escapes work in destinations and titles.
Reference-style links are not resolved; they stay literal text.
"""

from __future__ import annotations

import html
import re

from tejido.nodes import LinkType
from tejido.parsers.markdown import emoji
from tejido.parsers.markdown.elements import MarkdownToken

_ESCAPE_PATTERN = re.compile(r"\\([!\"#$%&'()*+,\-./:;<=>?@\[\\\]^_`{|}~])")
_URI_AUTOLINK_RE = re.compile(r"<([A-Za-z][A-Za-z0-9+.\-]{1,31}:[^\s<>]*)>")
_EMAIL_AUTOLINK_RE = re.compile(
    r"<([A-Za-z0-9.!#$%&'*+/=?^_`{|}~\-]+@[A-Za-z0-9](?:[A-Za-z0-9\-]{0,61}[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9\-]{0,61}[A-Za-z0-9])?)*)>"
)
_SHORTCODE_RE = re.compile(r":([a-z0-9_+\-]+):")


def process_escapes(text: str) -> str:
    """Replace backslash-escaped punctuation with the literal character."""
    text = _ESCAPE_PATTERN.sub(r"\1", text)
    return html.unescape(text) if "&" in text else text


def parse_link_destination(text: str, pos: int) -> tuple[str, int] | None:
    """Parse a link destination starting at ``pos``.

    Returns:
        ``(url, end_pos)`` or None if invalid.
    """
    text_len = len(text)
    while pos < text_len and text[pos] in " \t\n":
        pos += 1
    if pos >= text_len:
        return None

    if text[pos] == "<":
        pos += 1
        start = pos
        while pos < text_len:
            char = text[pos]
            if char == ">":
                return process_escapes(text[start:pos]), pos + 1
            if char in "\n<":
                return None
            if char == "\\" and pos + 1 < text_len:
                pos += 2
                continue
            pos += 1
        return None

    start = pos
    depth = 0
    while pos < text_len:
        char = text[pos]
        if char in " \t\n" or ord(char) < 0x20:
            break
        if char == "\\" and pos + 1 < text_len:
            pos += 2
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            if depth == 0:
                break
            depth -= 1
        pos += 1

    if depth != 0:
        return None
    return process_escapes(text[start:pos]), pos


def parse_link_title(text: str, pos: int) -> tuple[str, int] | None:
    """Parse a quoted or parenthesized title at ``pos``."""
    if pos >= len(text) or text[pos] not in "\"'(":
        return None
    closing = ")" if text[pos] == "(" else text[pos]
    index = pos + 1
    while index < len(text):
        char = text[index]
        if char == "\\" and index + 1 < len(text):
            index += 2
            continue
        if char == closing:
            return process_escapes(text[pos + 1 : index]), index + 1
        index += 1
    return None


class LinkParsingMixin:
    """Inline links, images, autolinks and emoji shortcodes.

    Required Host Methods:
        - _parse_inline(text) -> tuple[MarkdownToken, ...]
    """

    def _parse_inline(self, text: str) -> tuple[MarkdownToken, ...]:
        raise NotImplementedError

    def _find_closing_bracket(self, text: str, pos: int) -> int:
        """Find the ``]`` matching the ``[`` at ``pos``, or -1.

        Skips backslash escapes and code spans, and tracks nesting.
        """
        depth = 0
        index = pos
        text_len = len(text)
        while index < text_len:
            char = text[index]
            if char == "\\":
                index += 2
                continue
            if char == "`":
                run = len(text[index:]) - len(text[index:].lstrip("`"))
                close = text.find("`" * run, index + run)
                if close != -1:
                    index = close + run
                    continue
                index += run
                continue
            if char == "[":
                depth += 1
            elif char == "]":
                depth -= 1
                if depth == 0:
                    return index
            index += 1
        return -1

    def _parse_link_tail(self, text: str, pos: int) -> tuple[str, str | None, int] | None:
        """Parse ``(dest "title")`` starting at ``pos`` (the ``(``)."""
        if pos >= len(text) or text[pos] != "(":
            return None
        dest = parse_link_destination(text, pos + 1)
        if dest is None:
            return None
        url, index = dest

        title: str | None = None
        spaced = index
        while spaced < len(text) and text[spaced] in " \t\n":
            spaced += 1
        if spaced > index:
            parsed = parse_link_title(text, spaced)
            if parsed is not None:
                title, index = parsed
                while index < len(text) and text[index] in " \t\n":
                    index += 1
            else:
                index = spaced
        if index >= len(text) or text[index] != ")":
            return None
        return url, title, index + 1

    def _try_parse_link(self, text: str, pos: int) -> tuple[MarkdownToken, int] | None:
        """Parse ``[text](href "title")`` at ``pos``."""
        close = self._find_closing_bracket(text, pos)
        if close == -1:
            return None
        tail = self._parse_link_tail(text, close + 1)
        if tail is None:
            return None
        url, title, end = tail
        attrs = {"href": url, "linktype": link_type_for(url)}
        if title:
            attrs["title"] = title
        if attrs["linktype"] == LinkType.EMAIL:
            attrs["href"] = url.removeprefix("mailto:")
        children = self._parse_inline(text[pos + 1 : close])
        return MarkdownToken("link", attrs, children=children, markup="[]"), end

    def _try_parse_image(self, text: str, pos: int) -> tuple[MarkdownToken, int] | None:
        """Parse ``![alt](src "title")`` at ``pos`` (the ``!``)."""
        close = self._find_closing_bracket(text, pos + 1)
        if close == -1:
            return None
        tail = self._parse_link_tail(text, close + 1)
        if tail is None:
            return None
        src, title, end = tail
        alt_children = self._parse_inline(text[pos + 2 : close])
        alt = "".join(child.plain_text() for child in alt_children)
        attrs = {"src": src, "alt": alt, "title": title or ""}
        return MarkdownToken("image", attrs, content=alt, markup="!"), end

    def _try_parse_autolink(self, text: str, pos: int) -> tuple[MarkdownToken, int] | None:
        """Parse ``<https://...>`` or ``<user@example.com>``."""
        match = _URI_AUTOLINK_RE.match(text, pos)
        if match is not None:
            url = match.group(1)
            attrs = {"href": url, "linktype": link_type_for(url)}
            if attrs["linktype"] == LinkType.EMAIL:
                attrs["href"] = url.removeprefix("mailto:")
            label = MarkdownToken("text", content=url)
            return MarkdownToken("link", attrs, children=(label,), markup="autolink"), match.end()

        match = _EMAIL_AUTOLINK_RE.match(text, pos)
        if match is not None:
            address = match.group(1)
            attrs = {"href": address, "linktype": LinkType.EMAIL.value}
            label = MarkdownToken("text", content=address)
            return MarkdownToken("link", attrs, children=(label,), markup="autolink"), match.end()
        return None

    def _try_parse_emoji(self, text: str, pos: int) -> tuple[MarkdownToken, int] | None:
        """Parse a ``:shortcode:`` with a known name."""
        match = _SHORTCODE_RE.match(text, pos)
        if match is None:
            return None
        name = match.group(1)
        char = emoji.lookup(name)
        if char is None:
            return None
        return (
            MarkdownToken("emoji", {"name": name, "emoji": char}, content=char, markup=match.group(0)),
            match.end(),
        )


def link_type_for(url: str) -> str:
    """Classify a Markdown link target."""
    if url.startswith("mailto:"):
        return LinkType.EMAIL.value
    return LinkType.URL.value


__all__ = [
    "LinkParsingMixin",
    "link_type_for",
    "parse_link_destination",
    "parse_link_title",
    "process_escapes",
]
