"""
Constants used throughout the perception pipeline
"""

# Performance and monitoring
FPS_REPORT_INTERVAL = 100  # Report FPS every N processed frames
FPS_WINDOW_SIZE = 100  # Number of frames to average for FPS calculation

# Stream synchronization
DEFAULT_SYNC_QUEUE_SIZE = 10  # Pending messages kept per stream
DEFAULT_SYNC_TOLERANCE = 0.05  # Seconds between the earliest and latest stamp of a tuple

# Depth images
DEFAULT_DEPTH_SCALE = 0.001  # Metres per 16UC1 unit (millimetre depth)
DEFAULT_MIN_DEPTH_M = 0.1
DEFAULT_MAX_DEPTH_M = 10.0

# Classification
DEFAULT_TOP_K = 5

# Output
DEFAULT_JSON_DIR = "data"
DEFAULT_FRAMES_DIR = "output_frames"

# Camera reconnection
MAX_CAMERA_RECONNECT_ATTEMPTS = 2
CAMERA_RECONNECT_DELAY = 2.0  # Seconds between reconnection attempts

# Environment variables
ENV_CAMERA_URL = "CAMERA_URL"
ENV_PRECISION_LEVEL = "PRECISION_LEVEL"
ENV_VISUALIZE = "VISUALIZE"
