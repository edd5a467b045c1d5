"""Code shared by every app: API errors, response envelope, validation."""
