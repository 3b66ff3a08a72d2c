"""DNS gateway application."""
