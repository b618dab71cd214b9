"""Status lines for the PODIUM CLI.

Status lines go to stderr so stdout carries only command output. Emoji
markers fall back to ASCII on terminals that cannot encode them.
"""

import click

CAUTION = ("⚠️", "[!]")  # pragma: no mutate
SUCCESS = ("✅", "[OK]")  # pragma: no mutate
ERROR = ("❌", "[X]")  # pragma: no mutate


def _supports_character(character: str) -> bool:
    """True if `character` can be encoded on stderr."""
    stream = click.get_text_stream("stderr")  # pragma: no mutate
    encoding = getattr(stream, "encoding", None) or "ascii"
    try:
        character.encode(encoding)
    except UnicodeEncodeError:
        return False
    return True


def _glyph(pair: tuple[str, str]) -> str:
    emoji, fallback = pair
    return emoji if _supports_character(emoji) else fallback


def caution_glyph() -> str:
    """Warning marker: "⚠️" or "[!]"."""
    return _glyph(CAUTION)


def success_glyph() -> str:
    """Success marker: "✅" or "[OK]"."""
    return _glyph(SUCCESS)


def error_glyph() -> str:
    """Error marker: "❌" or "[X]"."""
    return _glyph(ERROR)


def warn(msg: str) -> None:
    """Bold yellow warning on stderr, e.g. ``⚠️  Speaker has no bookings.``"""
    click.secho(f"{caution_glyph()}  {msg}", fg="yellow", bold=True, err=True)


def success(msg: str) -> None:
    """Bold green confirmation on stderr, e.g. ``✅  Booking confirmed.``"""
    click.secho(f"{success_glyph()}  {msg}", fg="green", bold=True, err=True)


def error(msg: str) -> None:
    """Bold red failure line on stderr."""
    click.secho(f"{error_glyph()}  {msg}", fg="red", bold=True, err=True)
