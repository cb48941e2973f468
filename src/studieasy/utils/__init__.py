"""Small helpers shared across studieasy modules."""
