"""Qt desktop client."""
