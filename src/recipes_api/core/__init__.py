"""Core application plumbing: configuration, lifespan, errors and middleware."""
