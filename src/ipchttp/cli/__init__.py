"""Command line interface for ipchttp."""
