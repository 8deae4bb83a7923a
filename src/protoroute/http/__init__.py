"""HTTP primitives — the Request a scheme handler receives and the Response it returns."""
