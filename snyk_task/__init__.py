"""Snyk pipeline task — install, authenticate, test and monitor with the Snyk CLI."""

__version__ = "0.1.0"
