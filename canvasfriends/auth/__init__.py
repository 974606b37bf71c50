"""Authentication of API requests with Firebase ID tokens."""
