from os import environ

from uvicorn import run

from bankcards.log import configure_logging


def main() -> None:
    configure_logging()
    run(
        "bankcards.app:app",
        host=environ.get("HOST", "0.0.0.0"),
        port=int(environ.get("PORT", 8000)),
        workers=int(environ.get("WORKERS", 1)),
        log_config=None,
    )


if __name__ == "__main__":
    main()
