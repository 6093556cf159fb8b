"""Command implementations invoked by the CLI."""
