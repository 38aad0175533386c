"""Core formatting, masking and scanning components."""
