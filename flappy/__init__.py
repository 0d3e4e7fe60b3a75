"""
Flappy Package
==============

Real-time simulation engine for a single-screen, side-scrolling
obstacle-avoidance game:

- Viewport-derived sizing
- Flyer physics (gravity, damped jump arcs, jump cooldown)
- Obstacle stream (spawn, scroll, eviction)
- Collision and scoring
- Session lifecycle with restart lock
- Frame driver, snapshots and a Gymnasium wrapper

All tunable parameters live in game_config.yaml.
"""
