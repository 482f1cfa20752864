"""HTTP API for issuetrack."""
