from pydantic import BaseModel, Field
from typing import List


class Diagnostic(BaseModel):
    """A relationship skipped during compilation"""
    relation: str
    owner_id: str
    missing_id: str
    message: str


class CompilationResult(BaseModel):
    statements: List[str] = Field(default_factory=list)
    diagnostics: List[Diagnostic] = Field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return len(self.diagnostics) > 0

    def to_script(self) -> str:
        return "\n".join(statement.strip("\n") for statement in self.statements) + "\n"
