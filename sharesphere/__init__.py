"""ShareSphere - share trading service."""
