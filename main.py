"""
Blog content sync entry point.

Seeds an in-memory repository from a local folder of markdown posts,
loads the blog cache, then polls the repository for changes until
interrupted.

Run with: python main.py [--seed-dir DIR] [--interval SECONDS]
"""

import argparse
import asyncio
import logging
from pathlib import Path

from dotenv import load_dotenv

# Load .env.local first (if exists), then .env as fallback
project_root = Path(__file__).parent
load_dotenv(project_root / ".env.local")
load_dotenv()

from blogsync.config import (
    get_configuration_file,
    get_poll_interval,
    get_posts_folder,
    is_polling_enabled,
)
from blogsync.content import UpdatePoller, initialize_cache
from blogsync.repository import MemoryProvider, RawPost, RepositoryHandle

logger = logging.getLogger(__name__)


def seed_repository(provider: MemoryProvider, seed_dir: Path) -> int:
    """Copy posts and the configuration file from `seed_dir` into `provider`.

    Returns the number of posts added.
    """
    posts_dir = seed_dir / get_posts_folder()
    count = 0
    if posts_dir.is_dir():
        for path in sorted(posts_dir.rglob("*.md")):
            provider.replace_post(
                RawPost(
                    path=path.relative_to(posts_dir).as_posix(),
                    content=path.read_text(encoding="utf-8"),
                )
            )
            count += 1

    configuration = seed_dir / get_configuration_file()
    if configuration.is_file():
        provider.add_file(
            get_configuration_file(), configuration.read_text(encoding="utf-8")
        )
    return count


async def run(seed_dir: Path | None, interval: int | None) -> None:
    provider = MemoryProvider()
    if seed_dir:
        count = seed_repository(provider, seed_dir)
        logger.info(f"Seeded {count} post(s) from {seed_dir}")

    repository = RepositoryHandle(provider=provider, repo=provider.repository())
    initialize_cache(repository)
    # The full load already covers the seeded changes
    provider.fetch(repository.repo)

    if not is_polling_enabled():
        logger.info("Polling disabled (BLOG_POLLING), exiting after initial load")
        return

    poller = UpdatePoller(poll_interval=interval or get_poll_interval())
    poller.start_polling()
    try:
        await asyncio.Event().wait()
    finally:
        poller.stop_polling()


def main() -> None:
    parser = argparse.ArgumentParser(description="Keep a blog cache in sync")
    parser.add_argument(
        "--seed-dir", type=Path, help="Folder with posts and blog.yml to load"
    )
    parser.add_argument("--interval", type=int, help="Polling interval in seconds")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        asyncio.run(run(args.seed_dir, args.interval))
    except KeyboardInterrupt:
        logger.info("Stopped")


if __name__ == "__main__":
    main()
