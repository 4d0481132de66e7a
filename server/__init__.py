"""HTTP play service for Piquet."""
