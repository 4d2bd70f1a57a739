"""adasyn: recursive descent syntax analyser for a small Ada-like language."""

__version__ = "0.1.0"
