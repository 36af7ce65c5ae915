"""
Admin Blueprint - platform-wide maintenance actions for superadmins.

Routes:
- /admin/csrf-token - CSRF token for the POST actions below
- /admin/cleanup-database - Delete all non-demo data (superadmin only)
"""

from flask import Blueprint, request, jsonify, current_app, g, Response
from flask_wtf.csrf import generate_csrf
from typing import Tuple

from scims.database import get_session
from scims.decorators.admin_security import superadmin_required
from scims.services import audit_service
from scims.services.cleanup_service import run_database_cleanup
from scims.blueprints.metrics import record_cleanup_metrics


admin_bp = Blueprint('admin', __name__, url_prefix='/admin')


@admin_bp.route('/csrf-token')
@superadmin_required
def csrf_token() -> Response:
    """Hand out a CSRF token to the admin client."""
    return jsonify({'csrfToken': generate_csrf()})


@admin_bp.route('/cleanup-database', methods=['POST'])
@superadmin_required
def cleanup_database() -> Tuple[Response, int]:
    """
    Delete every business, store, account and dependent row that is not
    demo data, keeping all superadmin accounts.

    Blocks until every cleanup step has been attempted. Concurrent runs are
    not serialized here; only one admin session should trigger it at a time.
    """
    session_db = get_session()
    current_app.logger.warning(f"Database cleanup requested by user {g.user.id}")

    report = run_database_cleanup(session_db, current_app.config)

    record_cleanup_metrics(report)
    ip_address = request.headers.get('X-Forwarded-For', request.remote_addr)
    audit_service.log_cleanup(session_db, g.user.id, report, ip_address=ip_address)

    return jsonify(report), 200
