"""Core domain logic: session identity, key scheme, local fallback."""
