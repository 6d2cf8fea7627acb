"""Resource catalog service - read-only queries over storage and compute resources."""

__version__ = "0.1.0"
