# exceptions.py


class ResumeScreenerError(Exception):
    """Base error for the resume screener."""


class InsufficientTextError(ResumeScreenerError):
    """Raised when a resume yields too little text to analyse."""


class StorageError(ResumeScreenerError):
    """Raised when the candidate store cannot be read or written."""
