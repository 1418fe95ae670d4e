"""Error types raised by the services and mapped to HTTP status codes by the API"""
from typing import Dict


class TrackManagerError(Exception):
    """Base class for all track manager errors"""


class NotFoundError(TrackManagerError):
    """An id does not resolve to an existing record"""
    
    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} '{entity_id}' not found")


class FieldValidationError(TrackManagerError):
    """One or more fields are missing or violate their constraints"""
    
    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        summary = "; ".join(f"{field}: {message}" for field, message in self.errors.items())
        super().__init__(f"Invalid fields: {summary}")


class StoreError(TrackManagerError):
    """The database was unreachable or an operation on it failed"""
