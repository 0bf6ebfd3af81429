from typing import Callable, Optional, Type, TypeVar

from fastapi import FastAPI, Request

from graphwire.domain import IResolutionContext

T = TypeVar("T")

CONTEXT_STATE_ATTRIBUTE = "resolution_context"


def create_fastapi_dependency(
    context: IResolutionContext,
    dependency_type: Type[T],
    name: Optional[str] = None,
) -> Callable[[], T]:
    """Create a FastAPI Depends() callable returning a value of a resolution context.

    Every call returns the same instance, since the context constructs each
    value exactly once.

    Args:
        context: The resolution context to read from.
        dependency_type: The type to return.
        name: Binding name, for named values.

    Returns:
        A callable that FastAPI can use with Depends().

    Example:
        >>> context = resolve_dependencies(UserRepository, UserService)
        >>> get_user_service = create_fastapi_dependency(context, UserService)
        >>>
        >>> @app.get("/users")
        >>> async def list_users(service: UserService = Depends(get_user_service)):
        ...     return await service.get_all()
    """

    def dependency() -> T:
        """Return the value from the context."""
        return context.get(dependency_type, name=name)

    return dependency


def install_context(app: FastAPI, context: IResolutionContext) -> None:
    """Make a resolution context available to request dependencies.

    The context is stored on ``app.state``.

    Example:
        >>> app = FastAPI()
        >>> install_context(app, resolve_dependencies(Settings, UserService))
    """
    setattr(app.state, CONTEXT_STATE_ATTRIBUTE, context)


def create_request_dependency(dependency_type: Type[T], name: Optional[str] = None) -> Callable[[Request], T]:
    """Create a FastAPI dependency reading from the context installed on the application.

    Requires ``install_context`` to have been called on the application.

    Args:
        dependency_type: The type to return.
        name: Binding name, for named values.

    Returns:
        A callable that resolves from the context of the request's application.

    Example:
        >>> get_settings = create_request_dependency(Settings)
        >>>
        >>> @app.get("/info")
        >>> async def info(settings: Settings = Depends(get_settings)):
        ...     return {"version": settings.version}
    """

    def request_dependency(request: Request) -> T:
        """Return the value from the application's context."""
        context: Optional[IResolutionContext] = getattr(request.app.state, CONTEXT_STATE_ATTRIBUTE, None)
        if context is None:
            raise RuntimeError("Application does not have a resolution context. Did you forget to call install_context?")
        return context.get(dependency_type, name=name)

    return request_dependency
