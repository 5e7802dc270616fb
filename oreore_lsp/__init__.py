"""oreore Language Server package.

This package provides:
- A pygls protocol subclass for the framing edges and capability negotiation.
- The pygls language server session and its feature handlers.

Note: The server never evaluates documents; it analyses them statically.
"""

__all__ = [
    "protocol",
    "server",
]
