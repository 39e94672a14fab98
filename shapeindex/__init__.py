"""Shape annotation and shape index generation for benchmark RDF datasets."""

__version__ = "0.1.0"
