"""
Swipe Subsystem

JSON endpoints through which the presentation layer drives the swipe session.
"""

from .factory import create_swipe_module
from .routes import create_swipe_blueprint

__all__ = ['create_swipe_module', 'create_swipe_blueprint']
