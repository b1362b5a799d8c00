"""Command modules; importing them registers commands on the shared app."""
