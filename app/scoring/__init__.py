"""
scoring/: Use-Case Scoring Engine

Modules:
    utils.py                  - Decimal utilities
    quadrant.py               - 2x2 quadrant classifier
    impact_effort.py          - Impact / effort composite scores
    overrides.py              - Manual override resolution (effective scores)
    tshirt_sizing.py          - T-shirt size, cost, timeline and benefit estimator
    maturity.py               - Assessment maturity scores and survey time estimate
    recommendation_engine.py  - Assessment-driven use case recommendations
"""
