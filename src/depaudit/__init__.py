"""depaudit - test project dependencies for known vulnerabilities."""

__version__ = "0.1.0"
