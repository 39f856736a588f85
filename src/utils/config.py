"""Configuration management for the camera widget dashboard."""
import yaml
from pathlib import Path


class Config:
    """Handles loading and accessing configuration settings."""

    def __init__(self, config_path=None):
        if config_path is None:
            # Default to config/config.yaml relative to project root
            project_root = Path(__file__).parent.parent.parent
            config_path = project_root / "config" / "config.yaml"

        self.config_path = Path(config_path)
        self.config = self._load_config()

    def _load_config(self):
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r') as f:
            return yaml.safe_load(f) or {}

    def get(self, key_path, default=None):
        """
        Get configuration value using dot notation.

        Example: config.get('home_assistant.url')
        """
        keys = key_path.split('.')
        value = self.config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def get_server_url(self):
        """Get the Home Assistant base URL."""
        url = self.get('home_assistant.url')
        if not url:
            raise ValueError("home_assistant.url is not configured")
        return url

    def get_token(self):
        """Get the long-lived access token, if any."""
        return self.get('home_assistant.token')

    def get_request_timeout(self):
        """Get the HTTP timeout in seconds."""
        return self.get('home_assistant.timeout', 10)

    def get_max_image_size(self):
        """Get the largest (width, height) a camera image is decoded to."""
        return (
            self.get('camera.max_width', 1024),
            self.get('camera.max_height', 600)
        )

    def get_store_path(self):
        """Get the widget store file, relative paths resolved against the config file."""
        path = Path(self.get('store.path', 'camera_widgets.yaml'))
        if not path.is_absolute():
            path = self.config_path.parent / path
        return path

    def get_display_size(self):
        """Get display dimensions as (width, height) tuple."""
        return (
            self.get('display.width', 250),
            self.get('display.height', 122)
        )

    def get_columns(self):
        """Get the number of tile columns on the board."""
        return self.get('display.columns', 2)

    def get_poll_interval(self):
        """Get the connectivity poll interval in seconds."""
        return self.get('connectivity.poll_seconds', 5)
