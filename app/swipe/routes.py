"""
Swipe Routes

Flask routes exposing the swipe session callbacks as JSON endpoints.
"""

from flask import Blueprint, request, jsonify

from swipe_service import SwipeSession


def create_swipe_blueprint(session: SwipeSession) -> Blueprint:
    """Create a Flask blueprint for the swipe session.

    Args:
        session: Started swipe session the routes act on

    Returns:
        Flask blueprint with swipe routes
    """
    bp = Blueprint('swipe', __name__, url_prefix='/api')

    def _action_response(accepted: bool):
        return jsonify({
            "accepted": accepted,
            "state": session.snapshot().to_dict()
        })

    @bp.route("/state", methods=["GET"])
    def get_state():
        """Current paper, status, history and preferences."""
        return jsonify(session.snapshot().to_dict())

    @bp.route("/like", methods=["POST"])
    def like():
        return _action_response(session.on_like())

    @bp.route("/dislike", methods=["POST"])
    def dislike():
        return _action_response(session.on_dislike())

    @bp.route("/skip", methods=["POST"])
    def skip():
        return _action_response(session.on_skip())

    @bp.route("/retry", methods=["POST"])
    def retry():
        session.retry()
        return jsonify(session.snapshot().to_dict())

    @bp.route("/reset", methods=["POST"])
    def reset():
        """Reset the whole session, history included."""
        session.on_reset_session()
        return jsonify(session.snapshot().to_dict())

    @bp.route("/field", methods=["POST"])
    def select_field():
        """Switch the topic filter of the default feed."""
        payload = request.get_json(silent=True) or {}
        field = payload.get("field", "")
        if not isinstance(field, str):
            return jsonify({"error": "field must be a string"}), 400
        session.select_field(field)
        return jsonify(session.snapshot().to_dict())

    @bp.route("/history/toggle", methods=["POST"])
    def toggle_history():
        return jsonify({"show_history": session.toggle_history()})

    return bp
