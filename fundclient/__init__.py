"""Console client for the fundraising-event service."""

__version__ = "0.1.0"
