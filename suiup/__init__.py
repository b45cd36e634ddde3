"""Download, install and set default versions of Sui tooling binaries."""

__version__ = "0.0.8"