"""Login service: account registration, authentication and token lifecycle."""

__version__ = "0.1.0"
