"""Hypothesis properties of the layout codecs, discriminators and schema account."""
