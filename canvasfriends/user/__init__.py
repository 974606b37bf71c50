"""User documents and the identity attached to requests."""
