import argparse

import uvicorn

from motion_control.config import settings


def main():
    parser = argparse.ArgumentParser(description="Motion Control Video API server")
    parser.add_argument("--host", type=str, default=settings.host, help="Server host")
    parser.add_argument("--port", type=int, default=settings.port, help="Server port (env PORT)")
    parser.add_argument("--reload", action="store_true", default=False, help="Reload on code changes")
    args = parser.parse_args()

    uvicorn.run(
        "motion_control.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
