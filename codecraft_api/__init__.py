"""HTTP service for the CodeCraft estimation engine."""
