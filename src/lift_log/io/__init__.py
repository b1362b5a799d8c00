"""JSON serialization and the durable history file."""
