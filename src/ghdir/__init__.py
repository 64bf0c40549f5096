"""ghdir — download a single folder from a GitHub repository."""

__version__ = "0.1.0"
