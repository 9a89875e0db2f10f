"""Application entry point for the notes backend server."""

from notesapp.app import App
from notesapp.config import Config
from notesapp.core.core import Core
from notesapp.logging import setup_logging
from notesapp.web.runner import run_server


def main() -> None:
    config = Config()  # type: ignore[call-arg]
    setup_logging(config.log_level, config.debug)
    app = App(Core.from_config(config))
    run_server(app, config)


if __name__ == "__main__":
    main()
