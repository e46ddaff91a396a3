"""Encoders and decoders for NEC, RC5/RC6, Samsung and Sony infrared protocols on timing data."""

__version__ = "3.3.0"