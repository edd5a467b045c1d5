"""Business logic for accounts: registration and credential checks."""
