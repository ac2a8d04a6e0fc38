"""Converge a fleet of git repositories to a declarative configuration."""
