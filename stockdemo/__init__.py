"""Stock trading demo: quote lookup and order handlers plus a desktop client."""

__version__ = "0.1.0"
