"""Plain-SQL repositories, one per record table."""
