# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Errors raised while converting type annotations into validators.

Every failure carries a stable `ErrorKind` tag, a message and the span of the
offending node. Nothing in the converter catches these: they unwind to the
caller of the entry point, which reports them (see `flowprops.cli`).
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from flowprops.core.diagnostics import Diagnostic
from flowprops.core.span import Span


class ErrorKind(str, Enum):
	UNSUPPORTED_TYPE_KIND = "UnsupportedTypeKind"
	MISSING_REFERENCE = "MissingReference"
	MIXED_SHAPE = "MixedShapeError"
	UNSUPPORTED_CALL_SIGNATURE = "UnsupportedCallSignatureError"
	UNSUPPORTED_TOP_LEVEL_INTERSECTION = "UnsupportedTopLevelIntersectionError"
	ILLEGAL_ESCAPE_HATCH_PLACEMENT = "IllegalEscapeHatchPlacement"
	TYPEOF_IMPORT_UNSUPPORTED = "TypeofImportUnsupported"
	QUALIFIED_IDENTIFIER_UNSUPPORTED = "QualifiedIdentifierUnsupported"
	MISSING_TYPE_ANNOTATION = "MissingTypeAnnotation"


class ConversionError(ValueError):
	"""A type annotation could not be turned into a validator."""

	def __init__(self, kind: ErrorKind, message: str, *, span: Span | None = None) -> None:
		super().__init__(message)
		self.kind = kind
		self.message = message
		self.span = span or Span()

	def __str__(self) -> str:
		return f"{self.span.describe()}: [{self.kind.value}] {self.message}"

	def to_diagnostic(self) -> Diagnostic:
		return Diagnostic(
			message=self.message,
			code=self.kind.value,
			phase="convert",
			severity="error",
			span=self.span,
		)


class ResolutionError(ConversionError):
	"""An identifier, module or export could not be resolved."""

	def __init__(self, message: str, *, span: Span | None = None) -> None:
		super().__init__(ErrorKind.MISSING_REFERENCE, message, span=span)


def error_at(kind: ErrorKind, node: Any, message: str, *, file: str | None = None) -> ConversionError:
	"""Build a ConversionError positioned at `node` (anything with a `loc`)."""
	span = Span.from_loc(getattr(node, "loc", None), file=file)
	if kind is ErrorKind.MISSING_REFERENCE:
		return ResolutionError(message, span=span)
	return ConversionError(kind, message, span=span)


__all__ = ["ErrorKind", "ConversionError", "ResolutionError", "error_at"]
