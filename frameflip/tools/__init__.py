"""Developer tools built on the frame geometry."""
