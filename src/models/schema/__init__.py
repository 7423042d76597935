from src.models.schema.record import Record

__all__ = [
    "Record",
]
