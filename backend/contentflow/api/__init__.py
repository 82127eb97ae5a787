"""HTTP boundary: webhook admission and job status endpoints."""
