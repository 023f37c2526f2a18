"""lopper: dependency attribution, usage measurement and waste ranking."""

__version__ = "0.1.0"
