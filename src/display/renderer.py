"""Drawing utilities and layout helpers for the camera display."""
from PIL import Image, ImageDraw, ImageFont, ImageOps


class Renderer:
    """Helper class for drawing content on the display."""

    def __init__(self, width=250, height=122):
        self.width = width
        self.height = height
        self.image = None
        self.draw = None

    def create_canvas(self):
        """Create a new blank grayscale canvas."""
        self.image = Image.new('L', (self.width, self.height), 255)  # White background
        self.draw = ImageDraw.Draw(self.image)
        return self.image

    def get_font(self, size=12, bold=False):
        """
        Get a font for drawing text.

        Falls back to default font if custom fonts aren't available.
        """
        try:
            font_name = "DejaVuSans-Bold.ttf" if bold else "DejaVuSans.ttf"
            font_path = f"/usr/share/fonts/truetype/dejavu/{font_name}"
            return ImageFont.truetype(font_path, size)
        except OSError:
            return ImageFont.load_default()

    def draw_rectangle(self, x, y, width, height, fill=None, outline=0):
        """Draw a rectangle."""
        self.draw.rectangle(
            [(x, y), (x + width, y + height)],
            fill=fill,
            outline=outline
        )

    def draw_ellipse(self, x, y, width, height, fill=None, outline=0):
        """Draw an ellipse inside the given box."""
        self.draw.ellipse(
            [(x, y), (x + width, y + height)],
            fill=fill,
            outline=outline
        )

    def paste_image(self, image, bounds: tuple):
        """
        Scale an image to fit inside bounds and paste it centered.

        Args:
            image: PIL image
            bounds: (x, y, width, height)
        """
        x, y, width, height = bounds
        if width <= 0 or height <= 0:
            return

        fitted = ImageOps.contain(image.convert('L'), (width, height))
        offset_x = x + (width - fitted.width) // 2
        offset_y = y + (height - fitted.height) // 2
        self.image.paste(fitted, (offset_x, offset_y))

    def draw_camera_icon(self, bounds: tuple):
        """Draw the default camera icon centered in bounds."""
        x, y, width, height = bounds
        size = max(min(width, height) // 2, 8)
        body_x = x + (width - size) // 2
        body_y = y + (height - size * 3 // 4) // 2
        body_h = size * 3 // 4

        # Body, lens and viewfinder bump
        self.draw_rectangle(body_x, body_y, size, body_h, outline=0)
        lens = body_h // 2
        self.draw_ellipse(body_x + (size - lens) // 2, body_y + (body_h - lens) // 2, lens, lens, outline=0)
        self.draw_rectangle(body_x + size // 6, body_y - max(size // 8, 2), size // 4, max(size // 8, 2), fill=0)

    def draw_error_badge(self, x, y, size=12):
        """Draw a filled error marker with its top-right corner at (x, y)."""
        self.draw_ellipse(x - size, y, size, size, fill=0)
        self.draw.text((x - size // 2, y + size // 2), "!", font=self.get_font(max(size - 3, 6), True),
                       fill=255, anchor="mm")

    def get_image(self):
        """Get the current image."""
        return self.image
