"""Cross-cutting platform concerns: errors and middleware."""
