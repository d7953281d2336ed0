"""Emoji shortcodes recognized by the Markdown parser (``:name:``)."""

EMOJI: dict[str, str] = {
    "+1": "👍",
    "-1": "👎",
    "100": "💯",
    "blush": "😊",
    "check": "✔️",
    "clap": "👏",
    "coffee": "☕",
    "cry": "😢",
    "eyes": "👀",
    "fire": "🔥",
    "grin": "😁",
    "heart": "❤️",
    "heart_eyes": "😍",
    "joy": "😂",
    "laughing": "😆",
    "memo": "📝",
    "ok_hand": "👌",
    "party_popper": "🎉",
    "pray": "🙏",
    "question": "❓",
    "rocket": "🚀",
    "see_no_evil": "🙈",
    "smile": "😄",
    "smiley": "😃",
    "sparkles": "✨",
    "star": "⭐",
    "sunglasses": "😎",
    "tada": "🎉",
    "thinking": "🤔",
    "thumbsdown": "👎",
    "thumbsup": "👍",
    "warning": "⚠️",
    "wave": "👋",
    "white_check_mark": "✅",
    "wink": "😉",
    "x": "❌",
    "zap": "⚡",
}


def lookup(name: str) -> str | None:
    """Return the emoji for a shortcode name, or None."""
    return EMOJI.get(name)


__all__ = ["EMOJI", "lookup"]
