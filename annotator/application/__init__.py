"""Application layer: session use case orchestration."""
