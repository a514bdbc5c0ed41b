"""
Follow-Through Tracer

Step-by-step tracing of a turn as it moves from the API through the
orchestrator, the gateway and the extractor. Enabled with
FOLLOW_THROUGH=true; every call is a no-op otherwise.
"""
import logging
from datetime import datetime
from typing import Any

from .config import settings

# Dedicated logger for follow-through tracing
tracer = logging.getLogger("followthrough")


def _preview(data: Any, max_len: int = 60) -> str:
    """Single-line preview of a value."""
    if data is None:
        return "<None>"
    text = " ".join(str(data).split())
    if len(text) > max_len:
        return f"{text[:max_len]}..."
    return text


def _emit(icon: str, step: str, module: str, detail: str = "") -> None:
    if not settings.follow_through:
        return
    timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
    line = f"[{timestamp}] {icon} [{module}] {step}"
    tracer.info(f"{line}: {detail}" if detail else line)


def trace_section(title: str):
    """Divider for a major stage of the turn."""
    if not settings.follow_through:
        return
    tracer.info(f"── {title.upper()} " + "─" * max(0, 36 - len(title)))


def trace_input(module: str, input_name: str, value: Any):
    _emit("→", f"INPUT {input_name}", module, _preview(value))


def trace_step(module: str, description: str):
    _emit("•", "STEP", module, description)


def trace_call(module: str, function: str, args_preview: str = ""):
    detail = f"calling {function}()"
    if args_preview:
        detail += f" with {args_preview}"
    _emit("▶", "CALL", module, detail)


def trace_result(module: str, function: str, success: bool, result_preview: Any = None):
    detail = f"{function}() {'✓ SUCCESS' if success else '✗ FAILED'}"
    if result_preview is not None:
        detail += f" => {_preview(result_preview)}"
    _emit("◀", "RESULT", module, detail)


def trace_output(module: str, output_name: str, value: Any):
    _emit("←", f"OUTPUT {output_name}", module, _preview(value))


def setup_follow_through_logging():
    """Give the tracer its own bare-message handler when tracing is on."""
    if not settings.follow_through or tracer.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    tracer.addHandler(handler)
    tracer.setLevel(logging.INFO)
    tracer.propagate = False
    tracer.info("FOLLOW-THROUGH MODE ENABLED")
