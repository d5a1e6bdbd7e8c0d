import argparse
import asyncio
import logging

from src.backend.config import settings
from src.backend.utils.log_config import configure_logging


async def _seed() -> int:
    from src.backend.seeders.menu_seeder import seed_menus
    from src.backend.utils.database import AsyncSessionLocal, init_models

    await init_models()
    async with AsyncSessionLocal() as session:
        return await seed_menus(session)


def main():
    parser = argparse.ArgumentParser()
    sub = parser.add_subparsers(dest='command', required=True)

    serve = sub.add_parser('serve', help='run the API server')
    serve.add_argument('--host', default='127.0.0.1')
    serve.add_argument('--port', type=int, default=8000)
    serve.add_argument('--reload', action='store_true')

    sub.add_parser('seed', help='insert the default fixed menus into an empty table')

    args = parser.parse_args()
    configure_logging(settings.LOG_LEVEL)

    if args.command == 'serve':
        import uvicorn
        uvicorn.run('src.backend.app:app', host=args.host, port=args.port, reload=args.reload)
    elif args.command == 'seed':
        created = asyncio.run(_seed())
        logging.getLogger(__name__).info('Seeded %d menu(s)', created)


if __name__ == '__main__':
    main()
