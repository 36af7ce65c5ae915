"""
Admin security decorators.
Provides authentication and authorization for platform admin routes.
"""

from functools import wraps
from flask import session, g, current_app

from scims.exceptions import AuthenticationError, UnauthorizedError


def load_current_user():
    """
    Load the logged-in, active account into g.user (or None).

    Login itself happens elsewhere on the platform; this only reads
    session['user_id'].
    """
    g.user = None

    user_id = session.get('user_id')
    if user_id:
        from scims.database import get_session
        from scims.models import AppUser

        g.user = get_session().query(AppUser).filter_by(id=user_id, is_active=True).first()

    return g.user


def superadmin_required(f):
    """
    Decorator: Require a logged-in superadmin.

    Raises AuthenticationError (401) when nobody is logged in and
    UnauthorizedError (403) for any other role; both are rendered as JSON
    before the route touches any data.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user = load_current_user()

        if not user:
            raise AuthenticationError('Unauthorized. Please log in.')

        superadmin_role = current_app.config.get('SUPERADMIN_ROLE', 'superadmin')
        if user.role != superadmin_role:
            current_app.logger.warning(f"Denied admin action to user {user.id} with role {user.role}")
            raise UnauthorizedError('Unauthorized. Only superadmin can perform this action.')

        return f(*args, **kwargs)

    return decorated_function
