"""Trainer for a networked seven-zone strike pad: sequences, analysis, charts, HTTP client and a tkinter window."""

__version__ = "0.1.0"