"""Shared output formatting for the CLI."""

from .format import format_response, records_table, render_cli
from .pagination import paginate

__all__ = ["format_response", "records_table", "render_cli", "paginate"]
