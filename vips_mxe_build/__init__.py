"""Drive the MXE container build of libvips Windows binaries."""

__version__ = "0.3.0"
