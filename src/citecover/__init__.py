"""Citation cover pages for stored PDF documents."""

__version__ = "0.1.0"
