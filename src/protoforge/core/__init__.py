"""Response parsing, validation and run orchestration."""
