"""
NutriTrack Backend — Application Package Initializer
=====================================================

What: Marks the `nutritrack` directory as a Python package.
Why:  Enables module imports like `from nutritrack.config import settings`.
Who:  Used by uvicorn (`nutritrack.main:app`), pytest, and the console script.

Architecture Note:
    The backend is layered so every layer can be exercised on its own:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP verbs, paths, status codes
    ├─────────────────────────────────────┤
    │     Domain Services (per record)    │  ← validation, date-window math
    ├─────────────────────────────────────┤
    │       Record Shapes (pydantic)      │  ← defaults, violations, projection
    ├─────────────────────────────────────┤
    │   Document-Access Layer (generic)   │  ← uniform Success / Failure results
    ├─────────────────────────────────────┤
    │     Firestore AsyncClient (SDK)     │  ← network I/O only
    └─────────────────────────────────────┘

    Every layer below the routes answers with a result envelope instead of
    raising, so callers branch on `result.success` and nothing else.
"""

__version__ = "1.0.0"
