"""ScholarPort - scholarship portfolio export and import."""

__version__ = "0.1.0"
