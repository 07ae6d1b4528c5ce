"""
Process-level setup for the workout session engine: settings, logging and
dependency wiring (see ``session_engine.container``).
"""
