"""issuetrack: multi-tenant issue tracking backend."""

__version__ = "0.1.0"
