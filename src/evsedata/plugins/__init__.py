"""Plugin framework for extending EVSEManager sync behavior."""

from .base import PluginContext, PluginHook, SyncPlugin
from .fluentd_audit import FluentdAuditPlugin
from .prometheus_metrics import PrometheusMetricsPlugin

__all__ = [
    "FluentdAuditPlugin",
    "PluginContext",
    "PluginHook",
    "PrometheusMetricsPlugin",
    "SyncPlugin",
]
