"""Python client for the PROVIQUIZ API: HTTP wrapper, persisted auth state and exam store."""
