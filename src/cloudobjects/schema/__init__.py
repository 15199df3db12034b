from .validator import SchemaValidator

__all__ = ["SchemaValidator"]
