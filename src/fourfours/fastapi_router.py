"""
FastAPI router for the four fours expression engine.

Provides HTTP endpoints for evaluation, display markup, bracket removal,
puzzle rule checks and answer lookup.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NoReturn

from fourfours.answers import MAX_ANSWER, get_answer
from fourfours.display import to_display_markup
from fourfours.errors import EvaluationError, ExpressionError, ExpressionSyntaxError
from fourfours.evaluator import evaluate
from fourfours.fastapi_model import (
    AnswerResponse,
    EvaluationResponse,
    ExpressionRequest,
    MarkupResponse,
    PuzzleCheckRequest,
    PuzzleCheckResponse,
    SimplifyResponse,
)
from fourfours.limits import ExpressionLimits
from fourfours.puzzle import check_expression
from fourfours.simplify import remove_redundant_parentheses

if TYPE_CHECKING:
    from fastapi import APIRouter

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "/fourfours/v1"


def _status_for(error: ExpressionError) -> int:
    if isinstance(error, ExpressionSyntaxError):
        return 400
    if isinstance(error, EvaluationError):
        return 422
    return 500


def create_fourfours_router(
    *,
    limits: ExpressionLimits | None = None,
    prefix: str = DEFAULT_PREFIX,
) -> APIRouter:
    """Create FastAPI router for the four fours service."""
    from fastapi import APIRouter, HTTPException
    from fastapi.concurrency import run_in_threadpool

    router = APIRouter(prefix=prefix, tags=["Four Fours"])

    def _raise_for(error: ExpressionError, expression: str) -> NoReturn:
        status_code = _status_for(error)
        if status_code == 500:
            logger.error(
                "internal_expression_error",
                extra={"expression": expression, "error": str(error)},
                exc_info=True,
            )
            raise HTTPException(status_code=500, detail="Expression engine failure")

        logger.debug(
            "expression_rejected",
            extra={"expression": expression, "error": str(error)},
        )
        raise HTTPException(
            status_code=status_code,
            detail={
                "error": type(error).__name__,
                "message": str(error),
                "position": error.position,
            },
        )

    @router.post("/evaluate", response_model=EvaluationResponse)
    async def evaluate_expression(request: ExpressionRequest):
        """
        Evaluate an expression and return its exact value.

        Integers are returned bare; other values as a decimal string.
        """
        try:
            result = await run_in_threadpool(evaluate, request.expression, limits)
        except ExpressionError as e:
            _raise_for(e, request.expression)
        return EvaluationResponse(expression=request.expression, result=result)

    @router.post("/markup", response_model=MarkupResponse)
    async def expression_markup(request: ExpressionRequest):
        """Format an expression as KaTeX markup."""
        return MarkupResponse(
            expression=request.expression,
            markup=to_display_markup(request.expression, limits),
        )

    @router.post("/simplify", response_model=SimplifyResponse)
    async def simplify_expression(request: ExpressionRequest):
        """Remove brackets that do not change the value of an expression."""
        try:
            simplified = await run_in_threadpool(
                remove_redundant_parentheses, request.expression, limits
            )
        except ExpressionError as e:
            _raise_for(e, request.expression)
        return SimplifyResponse(expression=request.expression, simplified=simplified)

    @router.post("/check", response_model=PuzzleCheckResponse)
    async def check_puzzle(request: PuzzleCheckRequest):
        """Check an input against the four fours puzzle rules."""
        check = await run_in_threadpool(
            check_expression, request.expression, request.target, limits
        )
        return PuzzleCheckResponse(
            expression=check.expression,
            result=check.result,
            error=check.error,
            warning=check.warning,
        )

    @router.get("/answers/{target}", response_model=AnswerResponse)
    async def answer(target: int):
        """Look up a four fours expression for a number."""
        expression = await run_in_threadpool(get_answer, target)
        if not expression:
            raise HTTPException(
                status_code=404,
                detail={
                    "error": "not_found",
                    "message": f"No answer for {target} (answers cover 0 to {MAX_ANSWER})",
                },
            )
        return AnswerResponse(target=target, expression=expression)

    @router.get("/health")
    async def health_check():
        """Health check endpoint for the four fours service."""
        return {"status": "healthy", "service": "fourfours"}

    return router
