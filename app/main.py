import uvicorn

from app.core.app_factory import create_app
from app.core.config import settings

app = create_app(settings)


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=settings.app.port)
