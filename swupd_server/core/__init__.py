"""Cross-cutting configuration, logging and protocols."""
