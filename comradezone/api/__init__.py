"""HTTP API for the ComradeZone dating service."""
