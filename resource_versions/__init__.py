"""Count the stored versions of a resource in an S3-compatible bucket."""

__version__ = "0.3.0"
