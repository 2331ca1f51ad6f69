"""hrvlab -- heart rate variability analysis from RR-interval series."""

__version__ = "0.1.0"
