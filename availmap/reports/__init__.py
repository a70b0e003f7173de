"""Reports package - terminal views of the shared schedule."""
