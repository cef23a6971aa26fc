"""Host intrusion detection building blocks: file hashing, distribution detection and configuration."""

__version__ = "0.1.0"

__all__ = ["__version__"]