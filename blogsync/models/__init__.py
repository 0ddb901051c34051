"""Posts and blog configuration built from repository files."""
