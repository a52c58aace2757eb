"""
CLI entry point using Typer.

Provides commands for workout logging and analytics:
- log-workout: Log an exercise for a workout
- history: Display workout history
- delete-workout: Remove a workout
- status: Period dashboard (totals, heatmap, weekly volume, muscles)
- volume / heatmap / muscles / progression: Single period views
- trend: Strength trend of one exercise
- forecast: Goal completion forecast
- streak: Workout-day streaks
"""

from .app import app
from .commands import analysis, workouts  # noqa: F401  (registers commands)

if __name__ == "__main__":
    app()
