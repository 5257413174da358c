"""
Error taxonomy for the policy compiler
"""

from typing import List, Optional


class PolicyCompilerError(Exception):
    """Base error for the policy compiler."""


class ConfigurationError(PolicyCompilerError):
    """Entity configuration failed schema validation."""

    def __init__(self, message: str, fields: Optional[List[str]] = None):
        super().__init__(message)
        self.fields = fields or []


class DuplicateIdentifierError(PolicyCompilerError):
    """An identifier was registered twice for the same entity kind."""

    def __init__(self, entity_kind: str, identifier: str):
        super().__init__(f"{entity_kind} with ID '{identifier}' already exists")
        self.entity_kind = entity_kind
        self.identifier = identifier


class NotFoundError(PolicyCompilerError):
    """Lookup of an unregistered identifier."""

    def __init__(self, entity_kind: str, identifier: str):
        super().__init__(f"{entity_kind} with ID '{identifier}' not found")
        self.entity_kind = entity_kind
        self.identifier = identifier


class ValidationError(PolicyCompilerError):
    """Strict validation found a dangling reference."""

    def __init__(self, owner_kind: str, owner_id: str, missing_kind: str, missing_id: str):
        super().__init__(
            f"{owner_kind} '{owner_id}' references non-existent {missing_kind} '{missing_id}'"
        )
        self.owner_id = owner_id
        self.missing_id = missing_id


class CompilationError(PolicyCompilerError):
    """Unexpected failure while generating SQL."""
