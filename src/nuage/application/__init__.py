"""Application layer: incremental loading, session and playback services."""
