"""Telemetry: diagnostics for denied checks and operational logging.

Structure:
    diagnostics.py    - DiagnosticsSink protocol, LoggingDiagnostics
    models/           - Pydantic event models
    system/           - Singleton system logger
"""

from abac_core.telemetry.diagnostics import DiagnosticsSink, LoggingDiagnostics

__all__ = [
    "DiagnosticsSink",
    "LoggingDiagnostics",
]
