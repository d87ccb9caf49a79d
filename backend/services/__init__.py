"""Service packages for the narrated slide video pipeline."""
