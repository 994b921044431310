"""
flowprops.core: location and diagnostic primitives shared by every stage.

Modules:
  - span: Span (file/line/column wrapper around parser locations)
  - diagnostics: Diagnostic record rendered by the CLI
"""

__all__ = [
	"diagnostics",
	"span",
]
