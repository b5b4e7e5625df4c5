"""Option store, path resolution, dependency probing and notifications."""
