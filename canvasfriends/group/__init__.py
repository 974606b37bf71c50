"""Study groups and their membership codes."""
