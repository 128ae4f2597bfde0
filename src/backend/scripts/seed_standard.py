"""
Publish a standard.

Standards are promoted proposal snapshots and have no API mutation;
this script is how they get into the database.

Run with: python -m scripts.seed_standard --version v1 --content "..."
      or: python -m scripts.seed_standard --version v2 --from-proposal <id>
"""

import argparse
import asyncio
from typing import Optional

import structlog

from core.config import get_settings
from core.logging import configure_logging
from db.session import Database
from repositories.proposal_repository import ProposalRepository
from repositories.standard_repository import StandardRepository

logger = structlog.get_logger(__name__)


async def seed_standard(
    version: str,
    content: Optional[str],
    proposal_id: Optional[str],
    database: Optional[Database] = None,
) -> str:
    """
    Insert a standard and return its id.

    A passed-in database is left open; otherwise one is built from
    settings and disposed afterwards.
    """
    owns_database = database is None
    if database is None:
        database = Database(get_settings().DATABASE_URL)
    try:
        await database.create_all()
        async with database.session() as session:
            if proposal_id:
                proposal = await ProposalRepository(session).get_by_id(proposal_id)
                if proposal is None:
                    raise SystemExit(f"Proposal {proposal_id} not found")
                content = proposal.content
            if not content or not content.strip():
                raise SystemExit("Standard content must not be empty")

            standard = await StandardRepository(session).create(version=version, content=content.strip())
            logger.info("standard_published", standard_id=standard.id, version=version)
            return standard.id
    finally:
        if owns_database:
            await database.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Publish a standard")
    parser.add_argument("--version", required=True, help="Version label, e.g. v3")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--content", help="Standard text")
    source.add_argument("--from-proposal", dest="proposal_id", help="Copy the text of this proposal")
    args = parser.parse_args()

    configure_logging(get_settings())
    standard_id = asyncio.run(seed_standard(args.version, args.content, args.proposal_id))
    print(standard_id)


if __name__ == "__main__":
    main()
