"""Domain rules and repository protocols."""
