"""Exceptions raised by the collection import pipeline."""


class EmptySchemaError(ValueError):
    """The DBML text contained no Table blocks."""


class SchemaFetchError(RuntimeError):
    """The remote schema endpoint could not be reached or returned no DBML."""


class AnalysisError(RuntimeError):
    """The semantic analysis call failed; callers fall back to the standard builder."""


class ImportFlowError(ValueError):
    """An import session operation was called in the wrong step."""
