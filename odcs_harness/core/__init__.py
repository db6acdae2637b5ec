"""Shared building blocks: configuration, errors, logging and the database layer."""
