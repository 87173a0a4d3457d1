"""Command-stream generation for DYMO LabelWriter label printers from 1-bit raster lines."""

__version__ = "1.0.0"

__all__ = ["driver", "environment", "filter", "monitor", "options"]