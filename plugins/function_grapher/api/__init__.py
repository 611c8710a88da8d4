"""API routes for the Function Grapher plugin."""

from __future__ import annotations

from typing import Literal

from flask import Blueprint, Response, current_app, request
from pydantic import Field

from common.errors import AppError, ValidationAppError, ensure_app_error
from common.logging import get_logger
from common.responses import fail, ok
from common.validation import SchemaModel, ValidationError, parse_model

from ..core import (
    DEFAULT_RANGE,
    ExpressionError,
    ExpressionSyntaxError,
    GrapherSettings,
    LexError,
    ViewWindow,
    ZOOM_IN_FACTOR,
    ZOOM_OUT_FACTOR,
    compile_summary,
    evaluate_expression,
    load_settings,
    sample_expression,
    vocabulary,
)

logger = get_logger("function_grapher.api")


class ExpressionPayload(SchemaModel):
    expression: str
    lex_mode: Literal["strict", "lenient"] | None = None


class EvaluatePayload(ExpressionPayload):
    x: float


class SamplePayload(ExpressionPayload):
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    x_range: tuple[float, float] = DEFAULT_RANGE
    y_range: tuple[float, float] = DEFAULT_RANGE


class ZoomPayload(SchemaModel):
    x_range: tuple[float, float] = DEFAULT_RANGE
    y_range: tuple[float, float] = DEFAULT_RANGE
    factor: float | None = Field(default=None, gt=0)
    direction: Literal["in", "out"] | None = None


api_bp = Blueprint("function_grapher_api", __name__, url_prefix="/api/function_grapher")


def _settings() -> GrapherSettings:
    return load_settings(current_app.config.get("PLUGIN_SETTINGS", {}).get("function_grapher"))


def _invalid_request(exc: ValidationError) -> Response:
    return fail(
        ValidationAppError(
            message=str(exc),
            code="function_grapher.invalid_request",
            details=getattr(exc, "details", None),
        )
    )


def _expression_failure(exc: ExpressionError) -> AppError:
    if isinstance(exc, LexError):
        return ValidationAppError(
            message=str(exc),
            code="function_grapher.lex_error",
            details={"position": exc.position, "char": exc.char},
        )
    if isinstance(exc, ExpressionSyntaxError):
        return ValidationAppError(
            message=str(exc),
            code="function_grapher.syntax_error",
            details={"position": exc.position},
        )
    logger.error("expression engine failure: %s", exc)
    return ensure_app_error(exc, fallback_code="function_grapher.internal")


@api_bp.get("/vocabulary")
def vocabulary_endpoint() -> Response:
    return ok(vocabulary())


@api_bp.post("/compile")
def compile_endpoint() -> Response:
    raw_payload = request.get_json(silent=True) or {}
    try:
        payload = parse_model(ExpressionPayload, raw_payload)
    except ValidationError as exc:
        return _invalid_request(exc)
    settings = _settings()
    try:
        result = compile_summary(
            payload.expression,
            lex_mode=payload.lex_mode or settings.lex_mode,
            max_length=settings.max_expression_length,
        )
    except ExpressionError as exc:
        return fail(_expression_failure(exc))
    return ok(result)


@api_bp.post("/evaluate")
def evaluate_endpoint() -> Response:
    raw_payload = request.get_json(silent=True) or {}
    try:
        payload = parse_model(EvaluatePayload, raw_payload)
    except ValidationError as exc:
        return _invalid_request(exc)
    settings = _settings()
    try:
        result = evaluate_expression(
            payload.expression,
            payload.x,
            lex_mode=payload.lex_mode or settings.lex_mode,
            max_length=settings.max_expression_length,
        )
    except ExpressionError as exc:
        return fail(_expression_failure(exc))
    return ok(result)


@api_bp.post("/sample")
def sample_endpoint() -> Response:
    raw_payload = request.get_json(silent=True) or {}
    try:
        payload = parse_model(SamplePayload, raw_payload)
    except ValidationError as exc:
        return _invalid_request(exc)
    settings = _settings()
    if payload.width > settings.max_width or payload.height > settings.max_height:
        return fail(
            ValidationAppError(
                message=f"Canvas may be at most {settings.max_width}x{settings.max_height} pixels",
                code="function_grapher.invalid_request",
            )
        )
    try:
        result = sample_expression(
            payload.expression,
            width=payload.width,
            height=payload.height,
            x_range=payload.x_range,
            y_range=payload.y_range,
            lex_mode=payload.lex_mode or settings.lex_mode,
            max_length=settings.max_expression_length,
            workers=settings.sample_workers,
        )
    except ExpressionError as exc:
        return fail(_expression_failure(exc))
    except ValueError as exc:
        return fail(ValidationAppError(message=str(exc), code="function_grapher.invalid_window"))
    return ok(result)


@api_bp.get("/view/default")
def default_view() -> Response:
    return ok(ViewWindow.default().to_dict())


@api_bp.post("/view/zoom")
def zoom_view() -> Response:
    raw_payload = request.get_json(silent=True) or {}
    try:
        payload = parse_model(ZoomPayload, raw_payload)
    except ValidationError as exc:
        return _invalid_request(exc)
    factor = payload.factor
    if factor is None and payload.direction is not None:
        factor = ZOOM_IN_FACTOR if payload.direction == "in" else ZOOM_OUT_FACTOR
    if factor is None:
        return fail(
            ValidationAppError(
                message="Provide either factor or direction",
                code="function_grapher.invalid_request",
            )
        )
    try:
        window = ViewWindow(payload.x_range, payload.y_range).zoom(factor)
    except ValueError as exc:
        return fail(ValidationAppError(message=str(exc), code="function_grapher.invalid_window"))
    return ok(window.to_dict())


blueprints = [api_bp]


__all__ = [
    "blueprints",
    "compile_endpoint",
    "default_view",
    "evaluate_endpoint",
    "sample_endpoint",
    "vocabulary_endpoint",
    "zoom_view",
]
