"""
Common diagnostic structure for the CLI and host integrations.

Converter and resolver code raise exceptions (see `flowprops.errors`); the
driver turns them into `Diagnostic` records at the boundary so human and JSON
output share one shape.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .span import Span


@dataclass
class Diagnostic:
	"""Represents a transform diagnostic (error/warning/etc.)."""

	message: str
	code: str | None = None
	# Phase label: "parser" for syntax errors, "convert" for type conversion,
	# "load" for I/O problems reading a source file.
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Source location (Span() denotes unknown).
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	def format_human(self) -> str:
		code = f"[{self.code}] " if self.code else ""
		return f"{self.span.describe()}: {self.severity}: {code}{self.message}"

	def to_json(self) -> dict:
		"""Render to a structured JSON-friendly dict."""
		return {
			"phase": self.phase,
			"code": self.code,
			"message": self.message,
			"severity": self.severity,
			"file": self.span.file,
			"line": self.span.line,
			"column": self.span.column,
			"notes": list(self.notes),
		}


__all__ = ["Diagnostic"]
