"""SEO content opportunity engine."""

__version__ = "0.1.0"
