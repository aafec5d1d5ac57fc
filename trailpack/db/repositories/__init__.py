"""Row-level repository helpers, one module per table."""
