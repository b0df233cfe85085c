"""Tokenizer for the per-sheet CSV exports."""
