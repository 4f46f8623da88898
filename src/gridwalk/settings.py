"""Engine-wide constants."""

# Grid
TILE_SIZE = 32

# Objects
DEFAULT_OBJECT_SPEED = 0.2  # seconds per tile step
BASE_OBJECT_Z = 100.0
PLAYER_NAME = "player"

# Path search safety net for unbounded grids
MAX_PATH_EXPANSIONS = 10_000

# Speaker key -> portrait image id used by "talk" events
TALKER_IMAGE = {
    "player": "player_face",
    "bob": "bob_face",
    "alice": "alice_face",
    "sign": "sign_face",
}

DEFAULT_ACTION_TALK = ("player", "......", "L")

# Debug viewer
SCREEN_WIDTH = 640
SCREEN_HEIGHT = 480
FPS = 60
DIALOGUE_HEIGHT = 96

COLOR_BLACK = (0, 0, 0)
COLOR_FLOOR = (90, 110, 70)
COLOR_BLOCKED = (60, 60, 70)
COLOR_EVENT = (200, 170, 60)
COLOR_OBJECT = (150, 90, 60)
COLOR_PLAYER = (50, 180, 220)
COLOR_DIALOGUE_BG = (20, 20, 40, 220)
COLOR_DIALOGUE_TEXT = (240, 240, 240)
COLOR_NPC_NAME = (255, 210, 80)
