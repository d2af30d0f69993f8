"""HTTP API for boardsync."""
