"""Data-driven mob types with inheritable properties and probabilistic drop tables."""

__version__ = "0.1.0"
