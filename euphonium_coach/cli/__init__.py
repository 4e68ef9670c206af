"""Command-line interface for Euphonium Coach."""
