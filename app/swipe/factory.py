"""
Factory for creating the swipe module.
"""
from swipe_service import SwipeSession
from .routes import create_swipe_blueprint


def create_swipe_module(feed_config, session_config, **session_kwargs) -> dict:
    """Create swipe module with session and routes.

    Restores the stored session and loads the first feed batch before the
    routes are created.

    Args:
        feed_config: Upstream feed configuration
        session_config: Swipe session configuration
        **session_kwargs: Extra SwipeSession arguments (executor, timer_factory)

    Returns:
        Dictionary containing the service and blueprint
    """
    session = SwipeSession.from_config(feed_config, session_config, **session_kwargs)
    session.start()

    blueprint = create_swipe_blueprint(session)

    return {
        "service": session,
        "blueprint": blueprint
    }
