"""AI-assisted mock interview: session engine, crews and HTTP API."""

__version__ = "1.0.0"
