"""Administrative bulk operations."""
