"""HTTP API exposing session queries and mutations."""
