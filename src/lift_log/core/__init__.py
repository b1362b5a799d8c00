"""Pure domain logic: models, record store, aggregation, trends, sessions."""
