import uvicorn

from modelchat.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("modelchat.api.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
