# app/__main__.py

import uvicorn

from app.config import get_settings


def main():
    settings = get_settings()
    # log_config=None keeps the handlers installed by configure_logging
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    main()
