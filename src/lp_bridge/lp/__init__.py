"""Writing problems in the .lp file format."""

from .format import format_number, render_expression, to_tmp_file, write_lp, write_lp_file
from .utils import UniqueNameGenerator, validate_name

__all__ = [
    "format_number",
    "render_expression",
    "to_tmp_file",
    "write_lp",
    "write_lp_file",
    "UniqueNameGenerator",
    "validate_name",
]
