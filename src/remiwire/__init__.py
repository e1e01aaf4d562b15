"""Staff access control service for the Remiwire forex back-office."""

__version__ = "0.1.0"
