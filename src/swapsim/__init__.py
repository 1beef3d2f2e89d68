"""Jupiter swap dry-run: quote, build, optionally sign and simulate a Solana swap.

Nothing is ever broadcast.
"""

__version__ = "0.1.0"
