import math

# Geometry
EARTH_RADIUS_M = 6378137.0
METERS_PER_KILOMETER = 1000.0
SIXTY_DEGREES = math.pi / 3

# Smallest buffer width in meters. Also the tolerance used when deciding
# whether a point is close enough to count as inside the buffer.
MIN_BUFFER_WIDTH = 0.1

# Segments shorter than this (meters) are treated as a single point
DEGENERATE_SEGMENT_LENGTH = 0.1

# Angles (radians) outside this range make the triangle too flat to trust
MIN_STABLE_ANGLE = 0.0017
MAX_STABLE_ANGLE = 3.14

# Index subscription events
KEY_ENTERED_EVENT = "key_entered"
READY_EVENT = "ready"

# Default configuration values
DEFAULT_BUFFER_WIDTH = 50.0
DEFAULT_OUTPUT_FILE = "linebuffer.geojson"
DEFAULT_QUERY_TIMEOUT = 0.0

# Configuration sections
SOURCE_SECTION_NAME = "Source"
ANALYSIS_SECTION_NAME = "Analysis"
DESTINATION_SECTION_NAME = "Destination"
SETTINGS_SECTION_NAME = "Settings"

# Index CSV columns
KEY_COLUMN = "key"
LATITUDE_COLUMN = "latitude"
LONGITUDE_COLUMN = "longitude"
