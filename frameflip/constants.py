"""Default constants and configuration values."""

# Timing
DEFAULT_FPS = 60
MAX_LOOP_FPS = 240
DEFAULT_TIMING_FUNCTION = "linear"

# Eased progress is rounded up to this resolution
EASING_RESOLUTION = 1000

# Prefetch
DEFAULT_PREFETCH_WORKERS = 4
DEFAULT_CACHE_MAX_MB = 256

# Render targets
IMAGE_TAGS = ("img", "source", "embed", "iframe")

# Keyframes generator
DEFAULT_KEYFRAMES_NAME = "sprite"
