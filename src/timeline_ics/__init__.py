"""Convert Google location history exports into iCalendar files."""

__version__ = "0.1.0"
