"""Handlers for releases, downloads, installation, cache cleanup and self-update."""