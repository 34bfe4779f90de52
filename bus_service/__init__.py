"""Bus and staff record management service."""
