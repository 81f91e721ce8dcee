"""tafl — Hnefatafl rule engine with a computer opponent."""

__version__ = "0.1.0"
