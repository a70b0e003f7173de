"""Output package - terminal rendering."""
