"""Script parsers."""

from initguard.static.parsers.typescript import ParsedScript, ScriptParser

__all__ = ["ParsedScript", "ScriptParser"]
