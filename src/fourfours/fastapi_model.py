from typing import Optional

from pydantic import BaseModel, Field


class ExpressionRequest(BaseModel):
    """Expression payload."""

    expression: str = Field(..., description="Four fours expression as typed by the user")


class PuzzleCheckRequest(BaseModel):
    """Puzzle check payload."""

    expression: str = Field(..., description="Four fours expression as typed by the user")
    target: Optional[int] = Field(None, description="Number the expression should produce")


class EvaluationResponse(BaseModel):
    """Evaluation response."""

    expression: str = Field(..., description="The evaluated expression")
    result: str = Field(..., description="Integer or decimal rendering of the exact value")


class MarkupResponse(BaseModel):
    """Display markup response."""

    expression: str = Field(..., description="The formatted expression")
    markup: str = Field(..., description="KaTeX markup, empty when the expression does not parse")


class SimplifyResponse(BaseModel):
    """Redundant bracket removal response."""

    expression: str = Field(..., description="The expression as submitted")
    simplified: str = Field(..., description="The expression without redundant brackets")


class PuzzleCheckResponse(BaseModel):
    """Puzzle check response."""

    expression: str = Field(..., description="The input with characters outside the language dropped")
    result: Optional[str] = Field(None, description="Rendered result, truncated when not a valid answer")
    error: Optional[str] = Field(None, description="Why the result does not count as an answer")
    warning: Optional[str] = Field(None, description="First puzzle rule the input breaks")


class AnswerResponse(BaseModel):
    """Answer lookup response."""

    target: int = Field(..., description="The requested number")
    expression: str = Field(..., description="A four fours expression evaluating to the target")
