import argparse
import logging

from countdown.controller import CountdownController

LOG_FORMAT = "%(asctime)s — %(name)s — %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="countdown", description="Countdown timer")
    parser.add_argument("--seconds", type=int, default=CountdownController.INITIAL_SECONDS,
                        help="initial duration in seconds (default: %(default)s)")
    parser.add_argument("--theme", default="darkly",
                        help="ttkbootstrap theme (default: %(default)s)")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def parse_args(argv=None) -> argparse.Namespace:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.seconds < CountdownController.MIN_VALUE:
        parser.error(f"--seconds must be at least {CountdownController.MIN_VALUE}")
    return args


def configure_logging(level: str):
    logger = logging.getLogger("countdown")
    logger.setLevel(level)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.log_level)

    # erst hier importieren, damit --help ohne Display funktioniert
    from countdown.gui import TimerApp
    TimerApp(initial_seconds=args.seconds, theme=args.theme).run()


if __name__ == "__main__":
    main()
