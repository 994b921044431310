# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
flowprops: generate runtime prop validators from Flow props types.

Stages:
  parser: lark grammar + builder for the Flow declaration subset
  resolver/exports: scopes, bindings and cross-file import following
  converter: type annotation -> validator expression dispatch table
  host: component discovery and static field splicing
  cli: `python -m flowprops`
"""

__all__ = ["parser", "resolver", "exports", "converter", "validators", "host", "cli"]
