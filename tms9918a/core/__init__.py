"""Chip model: video memory, registers, port protocol and renderer."""
