"""Frequency conversion, audio providers and the streaming detection service."""
