"""Command implementations for the setup-lekko CLI."""
