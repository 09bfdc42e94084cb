"""Riverpark Content Builder: bulk AI product content for an aquarium-fish catalog."""

__version__ = "0.1.0"
