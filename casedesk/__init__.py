"""casedesk - Case assignment service for the immigration portal."""

__version__ = "0.1.0"
