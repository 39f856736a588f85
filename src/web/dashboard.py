"""Web API for managing camera widgets."""
import logging

from flask import Flask, jsonify, request

from src.core.events import (
    ConfigurationSaved,
    ConnectivityRestored,
    RefreshRequested,
    WidgetsRemoved,
)

logger = logging.getLogger(__name__)


def create_app(store, post_event, post_tap=None):
    """
    Build the management app.

    Handlers never touch widgets directly; they hand events to post_event,
    which queues them for the main loop.

    Args:
        store: WidgetStore, read for listings
        post_event: Callable taking one event
        post_tap: Callable taking an (x, y) tap position
    """
    app = Flask(__name__)

    @app.route('/api/widgets', methods=['GET'])
    def list_widgets():
        """List configured widgets."""
        widgets = [
            {'widget_id': w.widget_id, 'entity_id': w.entity_id}
            for w in store.get_all()
        ]
        return jsonify({'widgets': widgets})

    @app.route('/api/widgets', methods=['POST'])
    def save_widget():
        """Save the configuration of a widget."""
        data = request.get_json(silent=True) or {}

        try:
            widget_id = int(data['widget_id'])
        except (KeyError, TypeError, ValueError):
            return jsonify({'error': 'widget_id must be an integer'}), 400

        entity_id = data.get('entity_id')
        if not isinstance(entity_id, str) or not entity_id.strip():
            logger.error("Did not receive complete configuration data for widget %d", widget_id)
            return jsonify({'error': 'Missing entity_id'}), 400

        post_event(ConfigurationSaved(widget_id, entity_id.strip()))
        return jsonify({'success': True, 'widget_id': widget_id, 'entity_id': entity_id.strip()}), 202

    @app.route('/api/widgets/<int:widget_id>/refresh', methods=['POST'])
    def refresh_widget(widget_id):
        """Request a refresh of one widget."""
        post_event(RefreshRequested(widget_id))
        return jsonify({'success': True}), 202

    @app.route('/api/refresh', methods=['POST'])
    def refresh_all():
        """Request a refresh of every widget."""
        post_event(ConnectivityRestored())
        return jsonify({'success': True}), 202

    @app.route('/api/widgets/<int:widget_id>', methods=['DELETE'])
    def remove_widget(widget_id):
        """Remove a widget."""
        post_event(WidgetsRemoved([widget_id]))
        return jsonify({'success': True}), 202

    @app.route('/api/tap', methods=['POST'])
    def tap():
        """Forward a tap on the display."""
        if post_tap is None:
            return jsonify({'error': 'Touch input not available'}), 404

        data = request.get_json(silent=True) or {}
        try:
            position = (int(data['x']), int(data['y']))
        except (KeyError, TypeError, ValueError):
            return jsonify({'error': 'x and y must be integers'}), 400

        post_tap(position)
        return jsonify({'success': True}), 202

    return app
