"""Business logic for the FutureMedia application.

Each module takes a SQLAlchemy session and an explicit `Caller` and raises
`futuremedia.core.errors.AppError` subclasses on failure.
"""
