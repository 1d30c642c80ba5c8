"""
Guided Interview Package

Drives a linear, conditionally-branching question-and-answer interview
over a static definition and accumulates typed answers.

ARCHITECTURAL GUARANTEE:
------------------------
The core (model, expressions, evaluator, engine) contains ZERO knowledge of:
    - Terminal or browser rendering
    - Storage media
    - Document rendering

Persistence, diagrams and template data are separate layers that consume
the engine's state unchanged.
"""

__version__ = "0.1.0"
