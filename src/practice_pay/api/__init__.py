"""HTTP API for the practice pay engine."""
