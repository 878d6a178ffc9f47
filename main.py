# main.py
from dotenv import load_dotenv
load_dotenv()

import uvicorn

from recipe_organizer.app import create_app
from recipe_organizer.config import Settings

settings = Settings.from_env()
app = create_app(settings=settings)

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_config=None,
    )
