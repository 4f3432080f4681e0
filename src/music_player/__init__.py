"""Music player session service with pluggable mock sources."""

__version__ = "0.1.0"
