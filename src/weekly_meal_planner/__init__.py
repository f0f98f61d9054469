"""Weekly meal planner - AI-generated weekly plans for onboarded users."""

__version__ = "0.1.0"
