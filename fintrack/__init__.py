"""FinTrack personal finance tracker.

The ``backend`` package serves the JSON API, ``frontend`` holds the
Streamlit dashboard that talks to it.
"""

__version__ = "1.0.0"
