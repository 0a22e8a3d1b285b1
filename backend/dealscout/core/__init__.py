"""Cross-cutting concerns: errors and logging setup."""
