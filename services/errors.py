"""
Domain errors raised by the service layer.

Routers translate these into HTTP responses; services never import FastAPI.
"""
from typing import Dict, List


class ServiceError(Exception):
     """Base class for business-rule failures."""

     def __init__(self, message: str):
          super().__init__(message)
          self.message = message


class ValidationFailed(ServiceError):
     """Input passed schema validation but breaks a data rule (unknown program, duplicate slug)."""

     def __init__(self, errors: Dict[str, List[str]], message: str = "The given data was invalid."):
          super().__init__(message)
          self.errors = errors

     @classmethod
     def for_field(cls, field: str, message: str) -> "ValidationFailed":
          return cls({field: [message]})


class NotFound(ServiceError):
     """The requested donation or program does not exist."""


class Conflict(ServiceError):
     """The operation would break referential integrity."""
