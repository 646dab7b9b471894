"""SQLite adapter: connection management, schema, and repositories."""
