"""Display helpers shared by API payloads and generated insight text."""

from __future__ import annotations

EMOTION_EMOJIS: dict[str, str] = {
	"happy": "\U0001F60A",
	"content": "\U0001F60C",
	"neutral": "\U0001F610",
	"worried": "\U0001F61F",
	"stressed": "\U0001F62B",
}

EMOTION_COLORS: dict[str, str] = {
	"happy": "#52c41a",
	"content": "#1890ff",
	"neutral": "#bfbfbf",
	"worried": "#faad14",
	"stressed": "#ff4d4f",
}

CATEGORY_COLORS: dict[str, str] = {
	"food": "#00f19f",
	"transport": "#7551FF",
	"shopping": "#FF6B6B",
	"entertainment": "#FFB443",
	"health": "#1890ff",
	"bills": "#ff4d4f",
	"travel": "#faad14",
	"other": "#bfbfbf",
}


def format_currency(amount: float, symbol: str = "$") -> str:
	"""`1234.5` -> `$1,234.50`, `-12` -> `-$12.00`."""

	sign = "-" if amount < 0 else ""
	return f"{sign}{symbol}{abs(amount):,.2f}"


def emotion_emoji(emotion: str) -> str:
	return EMOTION_EMOJIS.get(emotion.lower(), EMOTION_EMOJIS["neutral"])


def emotion_color(emotion: str) -> str:
	return EMOTION_COLORS.get(emotion.lower(), EMOTION_COLORS["neutral"])


def category_color(category: str) -> str:
	return CATEGORY_COLORS.get(category.lower(), CATEGORY_COLORS["other"])


__all__ = ["format_currency", "emotion_emoji", "emotion_color", "category_color"]
