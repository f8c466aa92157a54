"""Knowledge Portal - lesson training pipeline for community AI assistants."""

__version__ = "0.1.0"
