"""Framework layer: settings, startup checks and shared types."""
