"""Optional MLflow tracing for relayed analyses.

One trace per submission: the relay (or the MCP tool) opens the parent span,
``record_request`` tags it with the video URL, model and prompt size, and
``mlflow.gemini.autolog()`` adds the ``generate_content`` call as a child.

Requires the ``tracing`` extra (``mlflow-tracing``); without it every helper
here is a no-op. Enabled by ``MLFLOW_TRACKING_URI`` unless
``GEMINI_TRACING_ENABLED=false``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .config import ServerConfig, get_config

logger = logging.getLogger(__name__)

try:
    import mlflow
    import mlflow.gemini

    _HAS_MLFLOW = True
except ImportError:
    _HAS_MLFLOW = False


def is_enabled() -> bool:
    return _HAS_MLFLOW and get_config().tracing_enabled


def trace(name: str, span_type: str) -> Callable[[Callable], Callable]:
    """Wrap a relay entry point in an MLflow span; identity when tracing is off."""
    if not is_enabled():
        return lambda func: func
    return mlflow.trace(name=name, span_type=span_type)


def record_request(video_url: str, prompt: str, model: str) -> None:
    """Tag the active span with what is about to be sent to Gemini.

    The prompt text itself stays out of the trace; only its length is kept.
    """
    if not is_enabled():
        return
    span = mlflow.get_current_active_span()
    if span is None:
        return
    span.set_attributes(
        {"relay.video_url": video_url, "relay.model": model, "relay.prompt_chars": len(prompt)}
    )


def setup(cfg: ServerConfig | None = None) -> None:
    """Point MLflow at the tracking server and autolog Gemini calls.

    A tracking server outage is logged and the relay keeps serving.
    """
    if not is_enabled():
        return
    cfg = cfg or get_config()
    try:
        mlflow.set_tracking_uri(cfg.mlflow_tracking_uri)
        mlflow.set_experiment(cfg.mlflow_experiment_name)
        mlflow.gemini.autolog()
    except Exception:
        logger.warning("MLflow tracing setup failed, relaying without traces", exc_info=True)
        return
    logger.info(
        "Tracing relayed analyses to %s (experiment %s)",
        cfg.mlflow_tracking_uri,
        cfg.mlflow_experiment_name,
    )


def shutdown() -> None:
    """Flush traces still queued for the tracking server."""
    if not is_enabled():
        return
    try:
        mlflow.flush_trace_async_logging()
    except Exception:
        logger.warning("MLflow trace flush failed", exc_info=True)
