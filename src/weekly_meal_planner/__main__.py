"""Run with: python -m weekly_meal_planner"""

import uvicorn

from weekly_meal_planner.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "weekly_meal_planner.main:app",
        host=settings.host,
        port=settings.port,
    )
