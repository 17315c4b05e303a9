"""envstack - provision a Debian host and launch a self-hosted dev stack."""

__version__ = "0.1.0"
