from workflow_helper.api.workflows import router as workflows_router

__all__ = [
    "workflows_router",
]
