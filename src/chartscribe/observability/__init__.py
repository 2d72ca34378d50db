"""
Observability helpers (OpenTelemetry tracing).
"""

from .tracing import add_span_attribute, set_span_status, trace_operation

__all__ = ["trace_operation", "set_span_status", "add_span_attribute"]
