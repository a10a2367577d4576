"""regexfilter — first-match-wins line router."""

__version__ = "0.1.0"
