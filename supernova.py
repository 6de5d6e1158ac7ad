#!/usr/bin/env python3
"""
  *  S U P E R N O V A  *
  A core-collapse (Type II) supernova, rendered in ASCII.

  A massive supergiant pulses on the edge of instability, runs out of
  fuel, collapses under its own gravity, rebounds off a neutron-star core
  and blows its outer layers into space. The ejecta thin out into a
  nebula, the remnant keeps glowing, and the cycle starts again.

  Stages:
    #   giant       unstable supergiant envelope
    @   collapse    iron core gives way, the star caves in
    *   bounce      nuclear density reached, the infall rebounds
    *+  explosion   shock front and ejecta race outward
    .   nebula      the diffuse remnant cloud
    O   remnant     the neutron star left behind

  Controls:
    q         quit               SPACE     pause / resume
    r         restart the star   s         toggle stats overlay
    +/-       time scale

  Resizing the terminal re-centres the star without restarting it.

  Run with --plain for the bare clear-and-print renderer, --seed N for a
  reproducible sky, and --stats-log PATH to record telemetry as CSV.
"""

from __future__ import annotations

import argparse
import curses
import math
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, ClassVar, Sequence, TextIO

import numpy as np
from numpy.typing import NDArray

# ── Grid & timing ───────────────────────────────────────────────────────
WIDTH: int = 90
HEIGHT: int = 32
FPS: int = 30
MAX_PARTICLES: int = 450

# advance() clamps dt into [0, MAX_DT]
MAX_DT: float = 1.0

# Terminal cells are ~1.5× taller than wide; vertical offsets are scaled
ASPECT: float = 1.5

# ── Phases ──────────────────────────────────────────────────────────────
GIANT: str = "giant"
COLLAPSE: str = "collapse"
BOUNCE: str = "bounce"
EXPLOSION: str = "explosion"
NEBULA: str = "nebula"
PHASES: list[str] = [GIANT, COLLAPSE, BOUNCE, EXPLOSION, NEBULA]

# ── Stellar physics (illustrative, not astrophysical) ──────────────────
GIANT_RADIUS: float = 9.0        # R0, also the restart radius
PULSE_AMPLITUDE: float = 1.5
PULSE_RATE: float = 3.0          # rad/s
GIANT_LIFETIME: float = 5.0      # seconds before the core gives out

COLLAPSE_GRAVITY: float = 40.0   # contraction acceleration
BOUNCE_RADIUS: float = 3.0       # envelope radius that triggers the bounce
CORE_RADIUS: float = 2.0         # neutron star size

BOUNCE_SPEED: float = 25.0
BOUNCE_LIFETIME: float = 0.8
BOUNCE_BAND: float = 1.5         # shell thickness of the rebound ring

SHOCK_START: float = 3.0
SHOCK_SPEED: float = 30.0
SHOCK_LIMIT: float = 32.0
SHOCK_BAND: float = 1.6

NEBULA_SPEED: float = 6.0
NEBULA_LIMIT: float = 42.0
DUST_ODDS: int = 12              # one cell in DUST_ODDS shows dust

# ── Ejecta ──────────────────────────────────────────────────────────────
EJECTA_MIN_SPEED: int = 10
EJECTA_SPEED_SPREAD: int = 40    # speed = MIN + randint[0, SPREAD)
EJECTA_FLATTEN: float = 0.55     # vertical squash, matches ASPECT
EJECTA_MIN_LIFE: float = 2.5
EJECTA_LIFE_SPREAD: float = 1.5

# ── Symbols ─────────────────────────────────────────────────────────────
ENVELOPE = "#"
COLLAPSING = "@"
SHOCK = "*"
EJECTA = "+"
DUST = "."
REMNANT = "O"
EMPTY = " "

SYMBOLS: dict[str, str] = {
    "envelope": ENVELOPE,
    "collapsing": COLLAPSING,
    "shock": SHOCK,
    "ejecta": EJECTA,
    "dust": DUST,
    "remnant": REMNANT,
    "empty": EMPTY,
}

# 256-colour index, then an 8-colour fallback
SYMBOL_COLORS: dict[str, tuple[int, int]] = {
    ENVELOPE: (214, curses.COLOR_YELLOW),
    COLLAPSING: (202, curses.COLOR_RED),
    SHOCK: (231, curses.COLOR_WHITE),
    EJECTA: (220, curses.COLOR_YELLOW),
    DUST: (93, curses.COLOR_MAGENTA),
    REMNANT: (51, curses.COLOR_CYAN),
}

CLEAR_SCREEN = "\033[H\033[J"

# ── Captions ────────────────────────────────────────────────────────────
PHASE_LABELS: dict[str, str] = {
    GIANT: "supergiant",
    COLLAPSE: "core collapse",
    BOUNCE: "core bounce",
    EXPLOSION: "supernova",
    NEBULA: "remnant nebula",
}

PHASE_CAPTIONS: dict[str, list[str]] = {
    GIANT: [
        "a massive star in its last stage",
        "silicon, oxygen and carbon burn unevenly",
        "the envelope pulses with thermal instability",
    ],
    COLLAPSE: [
        "the core has turned to iron",
        "iron fusion yields no energy",
        "pressure support fails, gravity wins",
        "the star caves in within milliseconds",
    ],
    BOUNCE: [
        "the core reaches nuclear density",
        "infalling matter rebounds off a rigid core",
        "a shock wave is born",
    ],
    EXPLOSION: [
        "the shock tears through the outer layers",
        "plasma and dust race outward",
        "heavy elements forged in the blast, gold among them",
    ],
    NEBULA: [
        "the ejecta thin into a nebula",
        "a crab-like remnant drifts apart",
        "at the centre, a neutron star",
        "perhaps, one day, a pulsar",
    ],
}

LOG_INTERVAL: int = 30  # frames between periodic telemetry rows


def clamp(v: float, lo: float, hi: float) -> float:
    if v < lo:
        return lo
    if v > hi:
        return hi
    return v


def distance_field(width: int, height: int) -> NDArray[np.float64]:
    """Aspect-corrected distance of every cell from the grid centre."""
    cy = height / 2.0
    cx = width / 2.0
    ys, xs = np.mgrid[0:height, 0:width]
    dy = (ys - cy) * ASPECT
    dx = xs - cx
    return np.sqrt(dx * dx + dy * dy)


# ═══════════════════════════════════════════════════════════════════════
#  Ejecta
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class ParticleArena:
    """Fixed-capacity ejecta ensemble stored as parallel arrays.

    Slots are never added or removed. A particle is alive while its
    lifetime is positive; dead ones stay in place and are skipped.
    """

    capacity: int
    count: int = 0
    x: NDArray[np.float64] = field(init=False, repr=False)
    y: NDArray[np.float64] = field(init=False, repr=False)
    vx: NDArray[np.float64] = field(init=False, repr=False)
    vy: NDArray[np.float64] = field(init=False, repr=False)
    life: NDArray[np.float64] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.capacity <= 0:
            raise ValueError("particle capacity must be positive")
        self.x = np.zeros(self.capacity, dtype=np.float64)
        self.y = np.zeros(self.capacity, dtype=np.float64)
        self.vx = np.zeros(self.capacity, dtype=np.float64)
        self.vy = np.zeros(self.capacity, dtype=np.float64)
        self.life = np.zeros(self.capacity, dtype=np.float64)

    def spawn(self, cx: float, cy: float, rng: np.random.Generator) -> None:
        """Overwrite every slot with a fresh particle leaving (cx, cy)."""
        n = self.capacity
        angle = rng.random(n) * (2.0 * math.pi)
        speed = EJECTA_MIN_SPEED + rng.integers(0, EJECTA_SPEED_SPREAD, size=n)

        self.x[:] = cx
        self.y[:] = cy
        self.vx[:] = np.cos(angle) * speed
        self.vy[:] = np.sin(angle) * speed * EJECTA_FLATTEN
        self.life[:] = EJECTA_MIN_LIFE + rng.random(n) * EJECTA_LIFE_SPREAD
        self.count = n

    def update(self, dt: float) -> None:
        """Euler-step live particles and burn down their lifetime."""
        alive = self.alive()
        self.x[alive] += self.vx[alive] * dt
        self.y[alive] += self.vy[alive] * dt
        self.life[alive] -= dt

    def alive(self) -> NDArray[np.bool_]:
        """Mask of slots whose lifetime is still positive."""
        return self.life > 0

    def live_count(self) -> int:
        """Number of particles still in flight."""
        return int(np.count_nonzero(self.life > 0))


# ═══════════════════════════════════════════════════════════════════════
#  The star
# ═══════════════════════════════════════════════════════════════════════

class Star:
    """
    A massive star cycling through its death and rebirth.

    Holds every simulation scalar and the ejecta arena. advance() moves
    the active phase forward by dt and performs at most one transition;
    rendering only reads the state.
    """

    def __init__(
        self,
        width: int = WIDTH,
        height: int = HEIGHT,
        capacity: int = MAX_PARTICLES,
        rng: np.random.Generator | None = None,
        reset_core: bool = False,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"grid must be at least 1x1, got {width}x{height}")

        self.width: int = width
        self.height: int = height
        self.cx: float = width / 2.0
        self.cy: float = height / 2.0
        self.rng: np.random.Generator = (
            rng if rng is not None else np.random.default_rng()
        )
        # The reference leaves the neutron star in place across cycles
        self.reset_core: bool = reset_core

        self.radius: float = GIANT_RADIUS
        self.core_radius: float = 0.0
        self.explosion_radius: float = 0.0
        self.velocity: float = 0.0
        self.time: float = 0.0
        self.phase: str = GIANT
        self.particles: ParticleArena = ParticleArena(capacity)

        self.paused: bool = False
        self.frame: int = 0
        self.cycle: int = 0
        self.last_event: str = ""

        # Geometry never changes for a given grid; compute once
        self.dist: NDArray[np.float64] = distance_field(width, height)

    # ── Simulation ──────────────────────────────────────────────────

    def advance(self, dt: float) -> str:
        """Advance one tick. Returns the transition event ("" if none)."""
        if self.paused:
            return ""
        if math.isnan(dt):
            dt = 0.0
        dt = clamp(dt, 0.0, MAX_DT)

        self.frame += 1
        self.time += dt
        event = ""

        if self.phase == GIANT:
            self.radius = GIANT_RADIUS + math.sin(self.time * PULSE_RATE) * PULSE_AMPLITUDE
            if self.time > GIANT_LIFETIME:
                event = self._enter(COLLAPSE)
                self.velocity = 0.0

        elif self.phase == COLLAPSE:
            self.velocity += COLLAPSE_GRAVITY * dt
            self.radius -= self.velocity * dt
            if self.radius < BOUNCE_RADIUS:
                event = self._enter(BOUNCE)
                self.core_radius = CORE_RADIUS

        elif self.phase == BOUNCE:
            self.radius += BOUNCE_SPEED * dt
            if self.time > BOUNCE_LIFETIME:
                event = self._enter(EXPLOSION)
                self.explosion_radius = SHOCK_START
                self.spawn_particles()

        elif self.phase == EXPLOSION:
            self.explosion_radius += SHOCK_SPEED * dt
            self.update_particles(dt)
            if self.explosion_radius > SHOCK_LIMIT:
                event = self._enter(NEBULA)

        elif self.phase == NEBULA:
            self.explosion_radius += NEBULA_SPEED * dt
            self.update_particles(dt)
            if self.explosion_radius > NEBULA_LIMIT:
                event = self._enter(GIANT)
                self.radius = GIANT_RADIUS
                self.cycle += 1
                if self.reset_core:
                    self.core_radius = 0.0
                    self.velocity = 0.0

        return event

    def _enter(self, phase: str) -> str:
        """Switch phase, restart the phase clock and return the event name."""
        event = f"{self.phase}->{phase}"
        self.phase = phase
        self.time = 0.0
        self.last_event = event
        return event

    def resize(self, width: int, height: int) -> None:
        """Move the star onto a new grid without restarting its cycle.

        Live ejecta keep their offset from the centre.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"grid must be at least 1x1, got {width}x{height}")
        cx, cy = width / 2.0, height / 2.0
        self.particles.x += cx - self.cx
        self.particles.y += cy - self.cy
        self.width, self.height = width, height
        self.cx, self.cy = cx, cy
        self.dist = distance_field(width, height)

    def spawn_particles(self) -> None:
        self.particles.spawn(self.cx, self.cy, self.rng)

    def update_particles(self, dt: float) -> None:
        self.particles.update(dt)

    def label(self) -> str:
        """Human-readable name of the current phase."""
        return PHASE_LABELS.get(self.phase, self.phase)


# ═══════════════════════════════════════════════════════════════════════
#  Rasterization
# ═══════════════════════════════════════════════════════════════════════

def render_grid(
    star: Star, rng: np.random.Generator | None = None
) -> NDArray[np.str_]:
    """Rasterize the star into a height × width array of symbols.

    Layers are painted in priority order: the phase layer, then the
    remnant core, then live ejecta on top. Nebula dust is redrawn from
    rng (default: the star's own generator) every call.
    """
    d = star.dist
    grid = np.full(d.shape, EMPTY, dtype="<U1")
    phase = star.phase

    if phase == GIANT:
        grid[d <= star.radius] = ENVELOPE
    elif phase == COLLAPSE:
        grid[d <= star.radius] = COLLAPSING
    elif phase == BOUNCE:
        r = star.radius
        grid[(d <= r) & (d >= r - BOUNCE_BAND)] = SHOCK
    elif phase == EXPLOSION:
        r = star.explosion_radius
        grid[(d <= r) & (d >= r - SHOCK_BAND)] = SHOCK
    elif phase == NEBULA:
        gen = rng if rng is not None else star.rng
        speckle = gen.integers(0, DUST_ODDS, size=d.shape) == 0
        grid[(d <= star.explosion_radius) & speckle] = DUST

    # A zero radius would still match the centre cell, so skip it
    if star.core_radius > 0:
        grid[d <= star.core_radius] = REMNANT

    p = star.particles
    alive = p.alive()
    if alive.any():
        # astype truncates toward zero, same as an int cast
        px = p.x[alive].astype(np.int64)
        py = p.y[alive].astype(np.int64)
        inside = (px >= 0) & (px < star.width) & (py >= 0) & (py < star.height)
        grid[py[inside], px[inside]] = EJECTA

    return grid


def frame_text(grid: NDArray[np.str_]) -> str:
    """Join the symbol grid into newline-separated rows."""
    return "\n".join("".join(row) for row in grid.tolist())


# ═══════════════════════════════════════════════════════════════════════
#  Stats logger
# ═══════════════════════════════════════════════════════════════════════

class StatsLogger:
    """Writes phase telemetry to CSV for post-hoc tuning."""

    HEADER: ClassVar[str] = (
        "frame,time_s,cycle,phase,phase_time,radius,core_radius,"
        "explosion_radius,live_particles,event\n"
    )

    def __init__(self, path: Path) -> None:
        self._path = path
        self._fh: IO[str] | None = None
        self._t0: float = time.monotonic()
        self._last_frame: int = -1

    def open(self) -> None:
        try:
            self._fh = open(self._path, "w")
            self._fh.write(self.HEADER)
            self._fh.flush()
        except OSError:
            self._fh = None

    def log(self, star: Star, event: str = "") -> None:
        if self._fh is None:
            return
        t = time.monotonic() - self._t0
        try:
            self._fh.write(
                f"{star.frame},{t:.1f},{star.cycle},{star.phase},{star.time:.3f},"
                f"{star.radius:.3f},{star.core_radius:.3f},{star.explosion_radius:.3f},"
                f"{star.particles.live_count()},{event}\n"
            )
            if event:
                self._fh.flush()
        except OSError:
            self.close()

    def maybe_log(self, star: Star, event: str) -> None:
        """Log transitions always, everything else periodically.

        A paused star keeps its frame number, so a frame is logged once.
        """
        if event or (
            star.frame % LOG_INTERVAL == 0 and star.frame != self._last_frame
        ):
            self.log(star, event)
            self._last_frame = star.frame

    def close(self) -> None:
        if self._fh is not None:
            try:
                self._fh.close()
            except OSError:
                pass
            self._fh = None


# ═══════════════════════════════════════════════════════════════════════
#  Caption ticker
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class TickerMessage:
    """A single caption scrolling across the status bar."""
    text: str
    x: float  # position in ticker-space (0 = left edge)


class CaptionTicker:
    """A scrolling marquee narrating the current stage.

    A new phase cuts the cooldown short so its first caption shows up
    promptly; otherwise captions for the phase rotate at a steady pace.
    """

    def __init__(self) -> None:
        self.messages: list[TickerMessage] = []
        self._scroll_speed: float = 0.5   # chars per frame
        self._spawn_cooldown: int = 0
        self._min_gap: int = 8
        self._interval: int = 45          # frames between captions
        self._caption_idx: int = 0
        self._last_phase: str = ""

    def tick(self, ticker_width: int, phase: str) -> None:
        if ticker_width < 10:
            return

        for msg in self.messages:
            msg.x -= self._scroll_speed
        self.messages = [m for m in self.messages if m.x + len(m.text) > 0]

        if phase != self._last_phase:
            self._caption_idx = 0
            self._spawn_cooldown = min(self._spawn_cooldown, 5)
            self._last_phase = phase

        self._spawn_cooldown = max(0, self._spawn_cooldown - 1)
        if self._spawn_cooldown > 0 or not self._can_spawn(ticker_width):
            return

        pool = PHASE_CAPTIONS.get(phase)
        if not pool:
            return
        text = pool[self._caption_idx % len(pool)]
        self._caption_idx += 1
        self.messages.append(TickerMessage(text=text, x=float(ticker_width)))
        self._spawn_cooldown = self._interval

    def _can_spawn(self, ticker_width: int) -> bool:
        if not self.messages:
            return True
        rightmost = max(self.messages, key=lambda m: m.x + len(m.text))
        return rightmost.x + len(rightmost.text) < ticker_width - self._min_gap

    def render(
        self, stdscr: curses.window, row: int, col_start: int, ticker_width: int
    ) -> None:
        for msg in self.messages:
            msg_col = int(msg.x)
            vis_start = max(msg_col, 0)
            vis_end = min(msg_col + len(msg.text), ticker_width)
            if vis_start >= vis_end:
                continue
            offset = vis_start - msg_col
            visible = msg.text[offset : offset + (vis_end - vis_start)]
            try:
                stdscr.addstr(row, col_start + vis_start, visible, curses.A_DIM)
            except curses.error:
                pass


# ═══════════════════════════════════════════════════════════════════════
#  Color management
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class ColorMap:
    """One curses color pair per symbol."""

    _pairs: dict[str, int] = field(default_factory=dict)

    def setup(self) -> None:
        if not curses.has_colors():
            return
        curses.start_color()
        try:
            curses.use_default_colors()
            background = -1
        except curses.error:
            background = curses.COLOR_BLACK

        max_pairs = curses.COLOR_PAIRS - 1
        for pair_id, (symbol, (rich, basic)) in enumerate(SYMBOL_COLORS.items(), start=1):
            if pair_id > max_pairs:
                break
            color = rich if rich < curses.COLORS else basic
            curses.init_pair(pair_id, color, background)
            self._pairs[symbol] = pair_id

    def attr(self, symbol: str) -> int:
        pair = self._pairs.get(symbol, 0)
        bold = curses.A_BOLD if symbol in (REMNANT, EJECTA, SHOCK) else curses.A_NORMAL
        return curses.color_pair(pair) | bold


# ═══════════════════════════════════════════════════════════════════════
#  Drawing
# ═══════════════════════════════════════════════════════════════════════

def draw(
    stdscr: curses.window,
    star: Star,
    grid: NDArray[np.str_],
    cmap: ColorMap,
    ticker: CaptionTicker,
    show_stats: bool = False,
    status: str = "",
) -> None:
    """Paint the symbol grid, status bar and optional stats overlay.

    Only non-blank cells are written, so an erased screen plus this call
    is a full frame.
    """
    max_y, max_x = stdscr.getmaxyx()
    draw_rows = min(grid.shape[0], max_y - 1)
    draw_cols = min(grid.shape[1], max_x)

    view = grid[:draw_rows, :draw_cols]
    ys, xs = np.nonzero(view != EMPTY)
    symbols = view[ys, xs].tolist()

    _addstr = stdscr.addstr
    _attr = cmap.attr
    for y, x, sym in zip(ys.tolist(), xs.tolist(), symbols):
        try:
            _addstr(y, x, sym, _attr(sym))
        except curses.error:
            pass

    if show_stats:
        _draw_stats_overlay(stdscr, star, max_y, max_x)

    # ── Status bar (with caption ticker) ───────────────────────────
    left = f"  {star.label()}  cycle {star.cycle + 1}  t {star.time:4.1f}s  frame {star.frame:,}"
    pause = " [paused]" if star.paused else ""
    right = f"{pause} {status}  q spc r s +/-  "

    ticker_col = len(left) + 1
    ticker_width = max_x - len(left) - len(right) - 2

    if ticker_width < 10:
        line = (left + "  " + right)[: max_x - 1]
        try:
            stdscr.addstr(max_y - 1, 0, line, curses.A_DIM)
        except curses.error:
            pass
        return

    ticker.tick(ticker_width, star.phase)
    try:
        stdscr.addstr(max_y - 1, 0, left, curses.A_DIM)
    except curses.error:
        pass
    ticker.render(stdscr, max_y - 1, ticker_col, ticker_width)
    try:
        right_col = max_x - len(right)
        stdscr.addstr(max_y - 1, right_col, right[: max_x - 1 - right_col], curses.A_DIM)
    except curses.error:
        pass


def _draw_stats_overlay(
    stdscr: curses.window, star: Star, max_y: int, max_x: int
) -> None:
    """Draw the stellar telemetry panel in the bottom-right."""
    panel_w = 32
    lines = [
        f"{'':─<{panel_w - 2}}",
        " stellar state",
        f" phase       : {star.phase}",
        f" radius      : {star.radius:6.2f}",
        f" velocity    : {star.velocity:6.2f}",
        f" core        : {star.core_radius:6.2f}",
        f" shock       : {star.explosion_radius:6.2f}",
        f" ejecta      : {star.particles.live_count()}/{star.particles.capacity}",
        f" last event  : {star.last_event or 'none'}",
    ]
    x0 = max_x - panel_w - 2
    y0 = max_y - len(lines) - 2
    if x0 < 0 or y0 < 0:
        return

    for i, line in enumerate(lines):
        padded = f" {line:<{panel_w - 1}}"[:panel_w]
        try:
            stdscr.addstr(y0 + i, x0, padded, curses.A_DIM)
        except curses.error:
            pass


# ═══════════════════════════════════════════════════════════════════════
#  Drivers
# ═══════════════════════════════════════════════════════════════════════

def make_rng(seed: int | None) -> tuple[np.random.Generator, int]:
    """Seeded generator; without a seed, seed from the clock once."""
    if seed is None:
        seed = int(time.time())
    return np.random.default_rng(seed), seed


def run_plain(
    star: Star,
    fps: int = FPS,
    frames: int = 0,
    time_scale: float = 1.0,
    logger: StatsLogger | None = None,
    out: TextIO | None = None,
) -> int:
    """Clear-and-print loop. Runs forever when frames == 0.

    Returns the number of frames drawn.
    """
    stream = out if out is not None else sys.stdout
    frame_dt = 1.0 / fps
    drawn = 0
    while frames <= 0 or drawn < frames:
        t0 = time.monotonic()
        event = star.advance(frame_dt * time_scale)
        if logger is not None:
            logger.maybe_log(star, event)
        stream.write(CLEAR_SCREEN)
        stream.write(frame_text(render_grid(star)))
        stream.write("\n")
        stream.flush()
        drawn += 1
        time.sleep(max(0.0, frame_dt - (time.monotonic() - t0)))
    return drawn


TIME_SCALES: list[float] = [0.25, 0.5, 1.0, 2.0, 4.0]


def main(stdscr: curses.window, args: argparse.Namespace) -> None:
    try:
        curses.curs_set(0)
    except curses.error:
        pass
    stdscr.nodelay(True)
    stdscr.timeout(0)

    cmap = ColorMap()
    cmap.setup()
    ticker = CaptionTicker()

    rng, seed = make_rng(args.seed)

    def grid_size() -> tuple[int, int]:
        max_y, max_x = stdscr.getmaxyx()
        return max(1, min(args.width, max_x)), max(1, min(args.height, max_y - 1))

    def new_star() -> Star:
        width, height = grid_size()
        return Star(
            width=width,
            height=height,
            capacity=args.particles,
            rng=rng,
            reset_core=args.reset_core,
        )

    star = new_star()

    logger: StatsLogger | None = None
    if args.stats_log is not None:
        logger = StatsLogger(args.stats_log)
        logger.open()

    show_stats = False
    scale_idx = TIME_SCALES.index(1.0)
    frame_dt = 1.0 / args.fps
    drawn = 0

    try:
        while args.frames <= 0 or drawn < args.frames:
            t0 = time.monotonic()

            # ── Input ──────────────────────────────────────────────
            try:
                key = stdscr.getch()
            except curses.error:
                key = -1

            if key in (ord("q"), ord("Q")):
                break
            elif key == ord(" "):
                star.paused = not star.paused
            elif key in (ord("r"), ord("R")):
                star = new_star()
            elif key == curses.KEY_RESIZE:
                star.resize(*grid_size())
            elif key in (ord("s"), ord("S")):
                show_stats = not show_stats
            elif key in (ord("+"), ord("=")):
                scale_idx = min(len(TIME_SCALES) - 1, scale_idx + 1)
            elif key in (ord("-"), ord("_")):
                scale_idx = max(0, scale_idx - 1)

            # ── Simulate ───────────────────────────────────────────
            time_scale = TIME_SCALES[scale_idx]
            event = star.advance(frame_dt * time_scale)
            if logger is not None:
                logger.maybe_log(star, event)

            # ── Render ─────────────────────────────────────────────
            grid = render_grid(star)
            stdscr.erase()
            draw(stdscr, star, grid, cmap, ticker, show_stats=show_stats,
                 status=f"{time_scale:g}x seed {seed}")
            stdscr.refresh()
            drawn += 1

            time.sleep(max(0.0, frame_dt - (time.monotonic() - t0)))
    finally:
        if logger is not None:
            logger.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="ASCII core-collapse supernova animation",
    )
    parser.add_argument("--width", type=int, default=WIDTH,
                        help=f"Grid width in cells (default: {WIDTH})")
    parser.add_argument("--height", type=int, default=HEIGHT,
                        help=f"Grid height in cells (default: {HEIGHT})")
    parser.add_argument("--fps", type=int, default=FPS,
                        help=f"Frames per second (default: {FPS})")
    parser.add_argument("--particles", type=int, default=MAX_PARTICLES,
                        help=f"Ejecta particle count (default: {MAX_PARTICLES})")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed (default: current time)")
    parser.add_argument("--reset-core", action="store_true",
                        help="Clear the neutron star when the cycle restarts")
    parser.add_argument("--plain", action="store_true",
                        help="Clear-and-print output instead of curses")
    parser.add_argument("--frames", type=int, default=0,
                        help="Stop after N frames (default: 0, run forever)")
    parser.add_argument("--stats-log", type=Path, default=None, metavar="PATH",
                        help="Write phase telemetry to this CSV file")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.width <= 0 or args.height <= 0:
        parser.error("--width and --height must be positive")
    if args.fps <= 0:
        parser.error("--fps must be positive")
    if args.particles <= 0:
        parser.error("--particles must be positive")
    if args.frames < 0:
        parser.error("--frames must not be negative")
    return args


def cli(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    try:
        if args.plain:
            rng, _ = make_rng(args.seed)
            star = Star(args.width, args.height, args.particles, rng, args.reset_core)
            logger: StatsLogger | None = None
            if args.stats_log is not None:
                logger = StatsLogger(args.stats_log)
                logger.open()
            try:
                run_plain(star, fps=args.fps, frames=args.frames, logger=logger)
            finally:
                if logger is not None:
                    logger.close()
        else:
            curses.wrapper(main, args)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    cli()
