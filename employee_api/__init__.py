"""Employee records service: FastAPI routes over a time-bounded SQL store."""

__version__ = "0.1.0"
