"""Command-line interface for slidecode."""
