from fastapi import HTTPException, Request, status

from classwork.services.classwork_source import ClassworkSource


def get_classwork_source(request: Request) -> ClassworkSource:
    """The source opened by the application lifespan"""
    source = getattr(request.app.state, "classwork_source", None)
    if source is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Classwork source is not configured"
        )
    return source
