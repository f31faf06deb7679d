"""Polynomial optics models: polynomials, least-squares fitting, database files and forward reconstruction."""

__version__ = "0.1.0"
__all__ = ["npoly", "dbfile", "forward", "fitting"]