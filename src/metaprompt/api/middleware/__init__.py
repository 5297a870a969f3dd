"""Request/exception middleware."""
