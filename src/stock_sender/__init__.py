"""Tire stock report processing: vendor CSV export, summary report, vendor upload."""

__version__ = "0.1.0"
