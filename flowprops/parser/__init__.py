"""
flowprops parser: lark grammar for the Flow declaration subset plus the
builder producing `flowprops.parser.ast` nodes.

`parse_module` / `parse_file` raise on bad input; `parse_file_with_diagnostics`
is the driver-facing wrapper that turns those failures into `Diagnostic`s.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

from lark.exceptions import UnexpectedInput

from . import ast as parser_ast
from .parser import SourceSyntaxError, parse_file, parse_module
from flowprops.core.diagnostics import Diagnostic
from flowprops.core.span import Span


def _span_in_file(path: Path, loc: object | None) -> Span:
	return Span.from_loc(loc, file=str(path))


def parse_file_with_diagnostics(path: Path) -> Tuple[Optional[parser_ast.Module], List[Diagnostic]]:
	"""
	Parse one source file, reporting read and syntax errors as diagnostics.

	Returns `(module, [])` on success and `(None, [diagnostic])` otherwise.
	"""
	try:
		source = path.read_text(encoding="utf-8")
	except OSError as err:
		return None, [Diagnostic(message=f"cannot read file: {err}", phase="load", span=Span(file=str(path)))]
	try:
		return parse_module(source, file=str(path)), []
	except SourceSyntaxError as err:
		return None, [Diagnostic(message=str(err), phase="parser", span=_span_in_file(path, err.loc))]
	except UnexpectedInput as err:
		span = Span(
			file=str(path),
			line=getattr(err, "line", None),
			column=getattr(err, "column", None),
			raw=err,
		)
		return None, [Diagnostic(message=str(err).strip(), phase="parser", span=span)]


__all__ = [
	"parser_ast",
	"SourceSyntaxError",
	"parse_module",
	"parse_file",
	"parse_file_with_diagnostics",
]
