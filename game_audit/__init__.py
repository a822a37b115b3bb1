"""Static compliance scanning and remediation for HTML game artifacts."""

__version__ = "0.1.0"
