"""Core utilities: configuration, logging, errors and deep merge."""
