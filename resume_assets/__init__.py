"""Resume asset service: image uploads, quotas and print-data assembly."""

__version__ = "0.1.0"
