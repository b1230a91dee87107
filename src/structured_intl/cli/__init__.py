"""Command-line entry points for structured-intl."""
