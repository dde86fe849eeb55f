"""Command line clients."""
