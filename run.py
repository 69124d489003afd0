"""
Development Server Entry Point
==============================

Usage:
    python run.py              # Development mode with reload
    python run.py --no-reload  # Development mode without reload
    python run.py --port 3001
"""

import argparse


def main():
    """Run the development server."""
    import uvicorn
    from incident_tracker.core.config import settings

    parser = argparse.ArgumentParser(description="Run the Incident Tracker development server")
    parser.add_argument(
        "--no-reload",
        action="store_true",
        help="Disable auto-reload",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=3001,
        help="Port to bind to (default: 3001)",
    )
    args = parser.parse_args()

    print(f"\n{'='*50}")
    print(f"  {settings.APP_NAME} v{settings.APP_VERSION}")
    print(f"  Environment: {settings.ENVIRONMENT}")
    print(f"  Database: {settings.DATABASE_URL.split('@')[-1]}")
    print(f"{'='*50}\n")

    print(f"Server: http://{args.host}:{args.port}{settings.API_PREFIX}/incidents")
    print("Press CTRL+C to stop\n")

    uvicorn.run(
        "incident_tracker.main:app",
        host=args.host,
        port=args.port,
        reload=not args.no_reload,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
