"""Domain rules and API I/O schemas."""
