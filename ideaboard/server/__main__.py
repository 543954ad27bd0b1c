import uvicorn

from ideaboard.server.app import app
from ideaboard.server.shared import config


def main() -> None:
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == '__main__':
    main()
