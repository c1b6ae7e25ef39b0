"""Core: Pipeline context, engine, errors, and logging."""
