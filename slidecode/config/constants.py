"""Constants for slidecode."""

# Application constants
APP_NAME = "slidecode"

# Default paths
DEFAULT_WORKSPACE_ROOT = "."
DEFAULT_UPLOADS_DIR = "uploads"
DEFAULT_CONVERTED_DIR = "converted"
DEFAULT_QRCODES_DIR = "qrcodes"
DEFAULT_REPORTS_DIR = "reports"
DEFAULT_LOG_DIR = ".logs"
DEFAULT_CONFIG_FILE = "slidecode.yaml"

# Presentation formats accepted for batch processing
PRESENTATION_EXTENSIONS = [".ppt", ".pptx", ".pps", ".ppsx", ".odp", ".key"]

# Slide image formats recognised in converted output
SLIDE_IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg"}

# Batch defaults
DEFAULT_CONCURRENCY = 3
DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_TASK_TIMEOUT = 300  # 5 minutes

# Converter defaults
DEFAULT_CONVERSION_TIMEOUT = 120
DEFAULT_RENDER_DPI = 150
SLIDE_IMAGE_PATTERN = "slide-{index:03d}.png"
SLIDES_SUBDIR = "images"
FALLBACK_PREVIEW_FILE = "preview.html"

# QR code defaults
DEFAULT_CODE_SIZE = 300
DEFAULT_FOREGROUND_COLOR = "#000000"
DEFAULT_BACKGROUND_COLOR = "#FFFFFF"
DEFAULT_CAPTION_COLOR = "#333333"
DEFAULT_CAPTION_SIZE = 16
DEFAULT_CAPTION_FONT = "Arial"
STYLE_VARIANTS = ["default", "rounded", "gradient", "shadow"]

# Layout arithmetic (pixels)
WIDTH_PADDING = 100  # image_width = code_size + 100
HEIGHT_PADDING = 150  # image_height = code_size + 150
CODE_TOP = 60
CAPTION_CENTER_Y = 40
SECONDARY_CAPTION_OFFSET = 35  # below the code, to the text center
SECONDARY_CAPTION_SIZE = 12
SECONDARY_CAPTION_OPACITY = 0.7
SECONDARY_CAPTION_TEXT = "scan to preview"
MAX_CAPTION_LENGTH = 25
CAPTION_ELLIPSIS = "..."

# Style transform parameters
QR_BORDER_MODULES = 2
ROUNDED_CORNER_RADIUS = 10
SHADOW_MARGIN = 10
SHADOW_OFFSET = 3
SHADOW_RADIUS = 5
SHADOW_BLUR = 4
SHADOW_OPACITY = 0.2
GRADIENT_END_COLOR = "#F0F0F0"

# Cleanup
DEFAULT_CLEANUP_MAX_AGE_HOURS = 24
