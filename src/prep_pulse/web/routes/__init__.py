# ABOUTME: Routes module initialization.
# ABOUTME: Exports all route modules for FastAPI app.

from prep_pulse.web.routes import api

__all__ = ["api"]
