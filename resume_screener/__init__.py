"""Resume Screener package."""

__all__ = [
    "main",
    "config",
    "models",
    "exceptions",
    "dates",
    "experience",
    "fields",
    "recommender",
    "extractor",
    "db",
    "report",
    "utils",
]
