"""marksplit - split marker-delimited PDF bundles and extract their text."""

__version__ = "0.1.0"
