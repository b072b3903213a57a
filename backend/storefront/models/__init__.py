"""ORM Models — tables backing the SQL snapshot store."""
