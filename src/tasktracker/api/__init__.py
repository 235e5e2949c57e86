"""HTTP interface for the task tracker service."""
