"""Alumni survey backend."""
