"""Small helpers shared by the build stages."""
