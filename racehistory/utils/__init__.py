"""Shared helpers: duration codec, configuration, validation and file I/O."""
