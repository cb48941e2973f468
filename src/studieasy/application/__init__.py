"""Desktop application layer for the studieasy shell."""
