"""ThemePress: versioned theme drafts, immutable snapshots and page rendering."""

__version__ = "0.1.0"
