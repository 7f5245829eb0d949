"""Puts the repository root on sys.path so tests import tessvg without installing."""
