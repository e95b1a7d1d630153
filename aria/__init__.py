"""
Aria - character sheet storage API.

Authenticated players create, read, update and delete their own character
sheets. Every character query is scoped to the caller's identity.
"""

__version__ = "0.1.0"
