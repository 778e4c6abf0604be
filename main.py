import uvicorn

from photolab.config import configure_logging, get_settings
from photolab.main import create_app

settings = get_settings()
configure_logging(settings)
app = create_app(settings)

if __name__ == "__main__":
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
