#!/usr/bin/env python3
"""Main application for the camera widget dashboard."""
import logging
import signal
import sys
import threading
import time
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.core.controller import FetchGenerations, UpdateController
from src.core.dispatcher import MainDispatcher
from src.core.events import (
    ConfigurationSaved,
    ConnectivityRestored,
    WidgetsRemoved,
    dispatch_event,
)
from src.display.camera_view import CameraBoard
from src.display.driver import DisplayDriver
from src.display.renderer import Renderer
from src.homeassistant.client import HomeAssistantClient, UrlRepository
from src.homeassistant.images import ImageFetcher
from src.network.connectivity import ConnectivityGate, ConnectivityMonitor
from src.storage.widget_store import WidgetStore
from src.utils.config import Config
from src.web.dashboard import create_app

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(debug=False):
    """Configure root logging; debug also enables HTTP client logging."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
    )
    if not debug:
        logging.getLogger("urllib3").setLevel(logging.WARNING)
        logging.getLogger("PIL").setLevel(logging.WARNING)


class CameraDashboard:
    """Main camera widget application."""

    def __init__(self, config_path=None):
        """Wire up the store, network collaborators, controller and display."""
        self.config = Config(config_path)
        logger.info("Configuration loaded from %s", self.config.config_path)

        self.store = WidgetStore(self.config.get_store_path())
        self.gate = ConnectivityGate(self.config.get('network.interface'))
        self.monitor = ConnectivityMonitor(self.gate)

        self.url_repository = UrlRepository(self.config.get_server_url())
        self.client = HomeAssistantClient(
            self.url_repository,
            token=self.config.get_token(),
            timeout=self.config.get_request_timeout(),
        )
        self.fetcher = ImageFetcher(
            session=self.client.session,
            server_url=self.url_repository.get_url(),
            max_size=self.config.get_max_image_size(),
            timeout=self.config.get_request_timeout(),
        )

        width, height = self.config.get_display_size()
        self.board = CameraBoard(width, height, self.config.get_columns())
        self.renderer = Renderer(width, height)
        self.display = DisplayDriver(width, height)

        self.dispatcher = MainDispatcher()
        self.controller = UpdateController(
            self.store,
            self.gate,
            self.client,
            self.url_repository,
            self.fetcher,
            self.dispatcher,
            target_for=self.board.view_for,
            release_targets=self.board.remove,
            generations=FetchGenerations(),
        )

        for widget in self.store.get_all():
            self.board.view_for(widget.widget_id)
        logger.info("%d camera widgets configured", len(self.store))

        self.poll_interval = self.config.get_poll_interval()
        self.running = False
        self.frames = 0

    def post_event(self, event):
        """Queue an event for the main loop."""
        self.dispatcher.post(self.handle_event, event)

    def post_tap(self, position):
        """Queue a tap for the main loop."""
        self.dispatcher.post(self.board.handle_tap, position)

    def handle_event(self, event):
        """Run one event on the main context."""
        dispatch_event(self.controller, self.store, event)

    def render(self):
        """Draw the board and push it to the display."""
        self.renderer.create_canvas()
        self.board.render(self.renderer)
        self.display.display_image(self.renderer.get_image(), partial=self.frames > 0)
        self.frames += 1

    def start_web(self):
        """Serve the management API on a daemon thread."""
        app = create_app(self.store, self.post_event, self.post_tap)
        host = self.config.get('web.host', '0.0.0.0')
        port = self.config.get('web.port', 5000)
        thread = threading.Thread(
            target=app.run,
            kwargs={'host': host, 'port': port, 'use_reloader': False},
            name="web-dashboard",
            daemon=True,
        )
        thread.start()
        logger.info("Web dashboard listening on %s:%s", host, port)
        return thread

    def run_once(self, timeout=30):
        """Refresh every widget, wait for the results and render once."""
        self.post_event(ConnectivityRestored())
        if not self.dispatcher.run_until_idle(timeout=timeout):
            logger.warning("Gave up waiting for camera fetches after %s seconds", timeout)
        self.render()

    def run(self, web=False):
        """Run the main loop."""
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

        if web:
            self.start_web()

        self.running = True
        self.monitor.poll()
        # Coming on screen counts as a visibility restore
        self.post_event(ConnectivityRestored())
        last_poll = time.monotonic()

        try:
            while self.running:
                self.dispatcher.run_pending(timeout=0.5)

                if time.monotonic() - last_poll >= self.poll_interval:
                    last_poll = time.monotonic()
                    if self.monitor.poll():
                        self.post_event(ConnectivityRestored())

                if self.board.dirty:
                    self.render()
        except KeyboardInterrupt:
            logger.info("Shutdown requested...")
        finally:
            self.shutdown()

    def shutdown(self):
        """Clean shutdown."""
        logger.info("Shutting down camera dashboard...")
        self.running = False
        self.dispatcher.shutdown()
        self.display.sleep()

    def _signal_handler(self, signum, frame):
        """Handle shutdown signals."""
        self.running = False


def main(argv=None):
    """Entry point."""
    import argparse

    parser = argparse.ArgumentParser(description='Home Assistant camera widget dashboard')
    parser.add_argument(
        '--config',
        type=str,
        help='Path to configuration file',
        default=None
    )
    parser.add_argument(
        '--once',
        action='store_true',
        help='Refresh all widgets once, render and exit'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )
    parser.add_argument(
        '--web',
        action='store_true',
        help='Serve the management API while running'
    )
    parser.add_argument(
        '--add',
        nargs=2,
        metavar=('WIDGET_ID', 'ENTITY_ID'),
        help='Configure a widget and exit'
    )
    parser.add_argument(
        '--remove',
        nargs='+',
        type=int,
        metavar='WIDGET_ID',
        help='Remove widgets and exit'
    )
    parser.add_argument(
        '--list',
        action='store_true',
        help='List configured widgets and exit'
    )

    args = parser.parse_args(argv)
    setup_logging(args.debug)

    dashboard = CameraDashboard(args.config)

    if args.list:
        for widget in dashboard.store.get_all():
            print(f"{widget.widget_id}\t{widget.entity_id}")
        return 0

    if args.add or args.remove:
        if args.add:
            try:
                widget_id = int(args.add[0])
            except ValueError:
                parser.error(f"WIDGET_ID must be an integer, got {args.add[0]!r}")
            dashboard.post_event(ConfigurationSaved(widget_id, args.add[1]))
        if args.remove:
            dashboard.post_event(WidgetsRemoved(args.remove))
        dashboard.dispatcher.run_until_idle()
        dashboard.render()
        dashboard.shutdown()
        return 0

    if args.once:
        dashboard.run_once()
        dashboard.shutdown()
    else:
        dashboard.run(web=args.web)
    return 0


if __name__ == '__main__':
    sys.exit(main())
