"""Plan It — orbital layout engine for the gamified task tracker.

Sub-packages:
  layout   slot geometry, occupancy registry, auto-placement, drag & drop,
           change notification and the legacy continuous placer.
  web      FastAPI service exposing one layout session.
"""
