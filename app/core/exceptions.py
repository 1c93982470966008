# app/core/exceptions.py
from fastapi import Request, status
from fastapi.responses import JSONResponse
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)

class EvaluationException(Exception):
    """Base exception for evaluation errors"""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

class InvalidPatternException(EvaluationException):
    """A regex rule in the evaluation config does not compile"""
    pass

class RubricLoadException(EvaluationException):
    """Rubric configuration file missing or malformed"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

# Exception handlers
async def evaluation_exception_handler(request: Request, exc: EvaluationException):
    logger.error(f"Evaluation error: {exc.message}", extra={"details": exc.details})
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.message,
            "type": exc.__class__.__name__,
            "details": exc.details
        }
    )

async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Analysis failed on {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "analysis_failed",
            "message": str(exc) or "Unknown error"
        }
    )
