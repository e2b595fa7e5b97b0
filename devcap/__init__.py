"""devcap: aggregazione dei commit di molti repository git locali per stand-up e time tracking."""

__version__ = "0.1.0"
