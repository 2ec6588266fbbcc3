"""core/constants.py — Shared constants used across the codebase.

Centralises the fixed vocabularies (activity names, states, areas,
rarities) so there's exactly one place to change them.  Tunable
*numbers* live in ``data/tuning.toml`` (see ``core.tuning``).

Time Scale
~~~~~~~~~~
The simulation clock is measured in integer **milliseconds** of real
time.  ``GAME_MINUTES_PER_CALENDAR_TICK`` game-minutes pass every
calendar tick (1 s), so one real minute is one in-game day.
"""

# ── Activities ───────────────────────────────────────────────────────

HUNT = "hunt"
REST = "rest"
DORMANCY = "dormancy"
EXPLORE = "explore"
EXERCISE = "exercise"
THINK = "think"
INTERACT = "interact"
TOOL = "tool"
SOCIAL = "social"

ACTIVITIES = (HUNT, REST, DORMANCY, EXPLORE, EXERCISE,
              THINK, INTERACT, TOOL, SOCIAL)

# Activities that ignore the global cooldown
GLOBAL_COOLDOWN_EXEMPT = frozenset({REST, DORMANCY})

# Unlocked from the first tick
BASE_ACTIVITIES = frozenset({HUNT, REST, DORMANCY})

# ── Activity states ──────────────────────────────────────────────────

IDLE = "idle"
HUNTING = "hunting"
RESTING = "resting"
DORMANT = "dormant"
EXPLORING = "exploring"
EXERCISING = "exercising"
THINKING = "thinking"
INTERACTING = "interacting"
MAKING_TOOL = "making_tool"
SOCIALIZING = "socializing"

ACTIVITY_STATES = (IDLE, HUNTING, RESTING, DORMANT, EXPLORING,
                   EXERCISING, THINKING, INTERACTING, MAKING_TOOL,
                   SOCIALIZING)

# activity → the state the organism enters while performing it
STATE_FOR_ACTIVITY = {
    HUNT: HUNTING,
    REST: RESTING,
    DORMANCY: DORMANT,
    EXPLORE: EXPLORING,
    EXERCISE: EXERCISING,
    THINK: THINKING,
    INTERACT: INTERACTING,
    TOOL: MAKING_TOOL,
    SOCIAL: SOCIALIZING,
}

# States held until their own cooldown expires (not auto-returned)
HELD_STATES = frozenset({RESTING, DORMANT})

# ── Event areas / rarities ───────────────────────────────────────────

SEA = "sea"
LAND = "land"
SKY = "sky"
AREAS = (SEA, LAND, SKY)

COMMON = "common"
RARE = "rare"
EPIC = "epic"
RARITIES = (COMMON, RARE, EPIC)

# ── Afflictions ──────────────────────────────────────────────────────

INJURY = "injury"
POISON = "poison"
SUFFOCATION = "suffocation"
AFFLICTIONS = (INJURY, POISON, SUFFOCATION)

# ── Death causes ─────────────────────────────────────────────────────

DEATH_STARVATION = "starvation"
DEATH_DISEASE = "disease"
DEATH_MENTAL = "mental_collapse"

# ── Bounds ───────────────────────────────────────────────────────────

VITAL_MAX = 100.0
MAX_EVOLUTION_LEVEL = 100
GAME_MINUTES_PER_CALENDAR_TICK = 24
