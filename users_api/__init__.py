"""Users API: a CRUD REST service for user accounts."""

__version__ = "1.0.0"
