"""Output driver for the composed camera board."""
import logging
from pathlib import Path

from PIL import Image

logger = logging.getLogger(__name__)

try:
    from TP_lib import epd2in13_V4
    DISPLAY_AVAILABLE = True
except ImportError:
    # No panel attached, frames go to a PNG file
    DISPLAY_AVAILABLE = False


class DisplayDriver:
    """Pushes frames to the e-ink panel, or to a PNG in simulation mode."""

    def __init__(self, width=250, height=122, output_path=None):
        self.width = width
        self.height = height
        self.epd = None
        self.simulation_mode = not DISPLAY_AVAILABLE

        if output_path is None:
            output_path = Path(__file__).parent.parent.parent / ".cache" / "display_output.png"
        self.output_path = Path(output_path)

        if DISPLAY_AVAILABLE:
            try:
                self.epd = epd2in13_V4.EPD()
                self.epd.init(self.epd.FULL_UPDATE)
                logger.info("E-ink display driver initialized")
            except Exception as e:
                logger.warning("Failed to initialize display hardware, simulating: %s", e)
                self.simulation_mode = True

    def display_image(self, image: Image.Image, partial=False):
        """
        Show a frame.

        Args:
            image: PIL image, converted to 1-bit for the panel
            partial: Use partial refresh (faster but may have ghosting)
        """
        if image.size != (self.width, self.height):
            image = image.resize((self.width, self.height))
        image = image.convert('1')

        if self.simulation_mode:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            image.save(self.output_path)
            logger.debug("[SIMULATION] Frame saved to %s", self.output_path)
            return

        buffer = self.epd.getbuffer(image)
        if partial:
            self.epd.displayPartial(buffer)
        else:
            self.epd.display(buffer)

    def sleep(self):
        """Put the panel into low-power sleep mode."""
        if not self.simulation_mode and self.epd:
            try:
                self.epd.sleep()
            except Exception as e:
                logger.error("Error putting display to sleep: %s", e)
