"""Application entry point for the campaigndesk backend server."""

from campaigndesk.app import App
from campaigndesk.config import Config
from campaigndesk.logging import setup_logging
from campaigndesk.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
