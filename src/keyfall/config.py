W, H = 1280, 720
FPS_CAP = 240
FULLSCREEN = False

# lane geometry (px)
LANE_W = 72
LANE_STRIDE = 73
KEY_HEIGHT = 250
HIT_LINE = 106
NOTE_CULL_MARGIN = 50

# scroll speed is BASE_SPEED * msPerBeat / 100 px per ms
BASE_SPEED = 0.35

# judgment timing (ms)
MISS_WINDOW_MS = 200
ANIMATION_DURATION_MS = 300.0

# osu!mania playfield width used for x -> column
OSU_PLAYFIELD_W = 512

# colours
BG = (12, 12, 18)
HIT_LINE_COL = (255, 0, 0)
SEPARATOR_COL = (255, 255, 255, 102)
SKIN_COLORS = {
    "1": (235, 235, 245),
    "2": (120, 190, 255),
    "S": (255, 210, 120),
}
JUDGMENT_COLORS = {
    "MISS": (255, 90, 90),
    "HIT50": (255, 220, 160),
    "HIT100": (160, 255, 160),
    "HIT300": (160, 220, 255),
}
