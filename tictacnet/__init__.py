"""Networked tic-tac-toe over TCP or UDP, a chunked UDP chat, and small text tools."""

__version__ = "0.1.0"