"""PG Admin Dashboard: client-side logic for a paying-guest accommodation admin."""

__version__ = "0.1.0"
