"""Screen components."""

from .footer import render_footer
from .header import render_header
from .palette import render_help, render_palette
from .station_list import DETAILS_HEIGHT, format_station_row, render_details, render_station_list

__all__ = [
    "DETAILS_HEIGHT",
    "format_station_row",
    "render_details",
    "render_footer",
    "render_header",
    "render_help",
    "render_palette",
    "render_station_list",
]
