"""Search the memory of running Linux processes for values and narrow down the hits."""

__version__ = "0.1.0"