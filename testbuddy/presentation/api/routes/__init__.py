from testbuddy.presentation.api.routes.health import router as health_router
from testbuddy.presentation.api.routes.problems import router as problems_router
from testbuddy.presentation.api.routes.progress import router as progress_router
from testbuddy.presentation.api.routes.sessions import router as sessions_router

__all__ = ["health_router", "problems_router", "progress_router", "sessions_router"]
