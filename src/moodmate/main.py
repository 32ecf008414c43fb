"""Application entry point for MoodMate backend server."""

from moodmate.app import App
from moodmate.config import Config
from moodmate.logging import setup_logging
from moodmate.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
