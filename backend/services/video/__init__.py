"""Video composition of slide images and narration audio."""
