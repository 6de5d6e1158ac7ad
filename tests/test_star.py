from __future__ import annotations

import math

import numpy as np
import pytest

from supernova import (
    BOUNCE,
    COLLAPSE,
    CORE_RADIUS,
    EXPLOSION,
    GIANT,
    GIANT_RADIUS,
    MAX_DT,
    MAX_PARTICLES,
    NEBULA,
    PHASES,
    SHOCK_START,
    Star,
    clamp,
)

from conftest import DT


def test_initial_state(star):
    assert star.phase == GIANT
    assert star.radius == GIANT_RADIUS
    assert star.core_radius == 0.0
    assert star.explosion_radius == 0.0
    assert star.velocity == 0.0
    assert star.time == 0.0
    assert star.particles.capacity == MAX_PARTICLES
    assert star.particles.count == 0
    assert star.particles.live_count() == 0


def test_rejects_empty_grid():
    with pytest.raises(ValueError):
        Star(width=0, height=32)
    with pytest.raises(ValueError):
        Star(capacity=0)


def test_giant_pulses_around_base_radius(star):
    star.advance(DT)
    assert star.radius == pytest.approx(GIANT_RADIUS + math.sin(DT * 3.0) * 1.5)
    for _ in range(100):
        star.advance(DT)
        assert GIANT_RADIUS - 1.5 <= star.radius <= GIANT_RADIUS + 1.5
    assert star.phase == GIANT


def test_full_cycle_visits_every_phase_in_order(star):
    visited = [star.phase]
    for _ in range(2000):
        star.advance(DT)
        if star.phase != visited[-1]:
            visited.append(star.phase)
        if star.phase == GIANT and len(visited) > 1:
            break

    assert visited == [GIANT, COLLAPSE, BOUNCE, EXPLOSION, NEBULA, GIANT]
    assert star.radius == 9.0
    assert star.time == 0.0
    assert star.cycle == 1


@pytest.mark.parametrize("dt", [0.5, 1.0 / 7.0, 0.01])
def test_each_transition_resets_time(dt):
    star = Star(rng=np.random.default_rng(3))
    events: list[str] = []
    for _ in range(5000):
        event = star.advance(dt)
        if event:
            assert star.time == 0.0
            events.append(event)
        if len(events) == len(PHASES):
            break

    expected = [
        f"{PHASES[i]}->{PHASES[(i + 1) % len(PHASES)]}" for i in range(len(PHASES))
    ]
    assert events == expected


def test_transition_side_effects(star, run_until):
    run_until(star, COLLAPSE)
    assert star.velocity == 0.0
    assert star.time == 0.0

    run_until(star, BOUNCE)
    assert star.core_radius == CORE_RADIUS
    assert star.radius < 3.0

    run_until(star, EXPLOSION)
    assert star.explosion_radius == SHOCK_START
    assert star.particles.count == star.particles.capacity
    assert star.particles.live_count() == star.particles.capacity

    run_until(star, NEBULA)
    assert star.explosion_radius > 32.0

    run_until(star, GIANT)
    assert star.explosion_radius > 42.0
    assert star.radius == GIANT_RADIUS


def test_collapse_is_monotonic(star, run_until):
    run_until(star, COLLAPSE)
    velocities = [star.velocity]
    radii = [star.radius]
    while star.phase == COLLAPSE:
        star.advance(DT)
        velocities.append(star.velocity)
        radii.append(star.radius)

    assert len(velocities) > 3
    assert all(b > a for a, b in zip(velocities, velocities[1:]))
    assert all(b < a for a, b in zip(radii, radii[1:]))
    assert star.phase == BOUNCE


def test_bounce_ring_expands(star, run_until):
    run_until(star, BOUNCE)
    r0 = star.radius
    star.advance(DT)
    assert star.radius == pytest.approx(r0 + 25.0 * DT)


def test_remnant_survives_restart_by_default(star, run_until):
    run_until(star, NEBULA)
    run_until(star, GIANT)
    assert star.core_radius == CORE_RADIUS


def test_reset_core_clears_remnant(run_until):
    star = Star(rng=np.random.default_rng(9), reset_core=True)
    run_until(star, NEBULA)
    run_until(star, GIANT)
    assert star.core_radius == 0.0
    assert star.velocity == 0.0


def test_dt_is_clamped(star):
    star.advance(5.0)
    assert star.time == MAX_DT
    assert star.phase == GIANT

    star.advance(-1.0)
    assert star.time == MAX_DT

    star.advance(float("nan"))
    assert star.time == MAX_DT


def test_paused_star_does_not_move(star):
    star.advance(DT)
    before = (star.time, star.radius, star.frame)
    star.paused = True
    assert star.advance(DT) == ""
    assert (star.time, star.radius, star.frame) == before


def test_particles_idle_outside_explosion(star):
    star.spawn_particles()
    x0 = star.particles.x.copy()
    star.advance(DT)
    assert star.phase == GIANT
    np.testing.assert_array_equal(star.particles.x, x0)


def test_clamp():
    assert clamp(-1.0, 0.0, 1.0) == 0.0
    assert clamp(2.0, 0.0, 1.0) == 1.0
    assert clamp(0.25, 0.0, 1.0) == 0.25


def test_resize_keeps_cycle_and_recentres(star, run_until):
    run_until(star, EXPLOSION)
    star.advance(DT)
    phase, time_, shock = star.phase, star.time, star.explosion_radius
    offset_x = star.particles.x - star.cx
    offset_y = star.particles.y - star.cy

    star.resize(60, 20)

    assert (star.width, star.height) == (60, 20)
    assert (star.cx, star.cy) == (30.0, 10.0)
    assert star.dist.shape == (20, 60)
    assert star.dist[10, 30] == 0.0
    assert (star.phase, star.time, star.explosion_radius) == (phase, time_, shock)
    np.testing.assert_allclose(star.particles.x - star.cx, offset_x)
    np.testing.assert_allclose(star.particles.y - star.cy, offset_y)

    with pytest.raises(ValueError):
        star.resize(0, 20)
