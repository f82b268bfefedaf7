"""top2csv - turn top snapshot logs into per-process CSV time series."""

__version__ = "0.1.0"
