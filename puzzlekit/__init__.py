"""Textbook data structures, an A* eight-puzzle solver and a small GIF encoder."""

__version__ = "0.1.0"