#!/usr/bin/env python3
"""
EchoVault Demo Data Seeder

Seeds a small library of analysed recordings (with highlights, a folder
and overlapping tags) for one user so that search, the tag graph and the
statistics have something to show without calling the AI functions.
All demo recordings use the ``[DEMO]`` title prefix for idempotent management.

Usage:
    python scripts/seed_demo_data.py                    # Seed for demo-user (skip if exists)
    python scripts/seed_demo_data.py --user alice       # Seed for another user
    python scripts/seed_demo_data.py --clean            # Delete existing + re-seed
"""

from __future__ import annotations

import argparse
import asyncio
import io
import logging
import sys
import time
from pathlib import Path

# Ensure project root is on sys.path for ``src`` imports
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from pydub import AudioSegment  # noqa: E402
from sqlalchemy import select  # noqa: E402

from src.core.models import HighlightCreate, RecordingCreate, Sentiment  # noqa: E402
from src.core.utils import format_duration  # noqa: E402
from src.services.orchestrator import AUDIO_CONTENT_TYPE, object_key  # noqa: E402
from src.services.storage.database import get_session, init_db  # noqa: E402
from src.services.storage.models_db import Recording  # noqa: E402
from src.services.storage.object_store import LocalObjectStorage  # noqa: E402
from src.services.storage.repository import RecordingRepository  # noqa: E402

logger = logging.getLogger(__name__)

DEMO_PREFIX = "[DEMO]"
DEMO_FOLDER = "Demo"

SCENARIOS = [
    {
        "title": "Team Sync",
        "transcription": (
            "Good morning everyone. Let's go through the roadmap for the next quarter. "
            "The mobile release slips by one week, and we will meet again on Friday."
        ),
        "summary": "Weekly team sync covering the quarterly roadmap and the mobile release.",
        "sentiment": Sentiment.neutral,
        "tags": ["roadmap", "team", "planning"],
        "highlights": [(4, "Let's go through the roadmap"), (11, "We will meet again on Friday")],
        "duration_seconds": 754,
    },
    {
        "title": "Product Idea",
        "transcription": (
            "Quick idea: a shared playlist of voice notes for the whole team, "
            "tagged automatically so people can browse by topic."
        ),
        "summary": "An idea for shared, auto-tagged voice-note playlists.",
        "sentiment": Sentiment.positive,
        "tags": ["ideas", "team", "product"],
        "highlights": [(2, "A shared playlist of voice notes")],
        "duration_seconds": 96,
    },
    {
        "title": "Budget Review",
        "transcription": (
            "The infrastructure budget is over by twelve percent. "
            "We need to cut the staging environments before the end of the month."
        ),
        "summary": "Infrastructure spend is over budget; staging environments must be reduced.",
        "sentiment": Sentiment.negative,
        "tags": ["budget", "planning"],
        "highlights": [(1, "Over by twelve percent")],
        "duration_seconds": 1820,
    },
    {
        "title": "Voice Memo",
        "transcription": "Remember to call the dentist and pick up the dry cleaning.",
        "summary": None,
        "sentiment": Sentiment.neutral,
        "tags": [],
        "highlights": [],
        "duration_seconds": None,
    },
]


# ------------------------------------------------------------------
# Audio
# ------------------------------------------------------------------

def _placeholder_audio(seconds: int | None) -> bytes | None:
    """Silent WebM clip of the scenario's length (needs ffmpeg)."""
    try:
        buf = io.BytesIO()
        AudioSegment.silent(duration=(seconds or 5) * 1000).export(buf, format="webm")
        return buf.getvalue()
    except Exception as exc:
        print(f"  WARN  Could not encode placeholder audio, skipping upload: {exc}")
        return None


# ------------------------------------------------------------------
# Cleanup
# ------------------------------------------------------------------

async def _clean_demo_data(user_id: str, storage: LocalObjectStorage) -> int:
    """Delete all [DEMO] recordings (and their audio) for *user_id*. Returns count deleted."""
    deleted = 0

    async with get_session() as session:
        repo = RecordingRepository(session)

        stmt = select(Recording).where(
            Recording.user_id == user_id,
            Recording.title.like(f"{DEMO_PREFIX}%"),
        )
        result = await session.execute(stmt)
        demo_recordings = list(result.scalars().all())

        if not demo_recordings:
            print("  No existing demo data to clean.")
            return 0

        for rec in demo_recordings:
            key = storage.key_from_url(rec.audio_url) if rec.audio_url else None
            if key:
                await storage.remove(key, user_id)
            await repo.delete_recording(user_id, rec.id)
            print(f"  DELETE  {rec.title} (id={rec.id})")
            deleted += 1

        for folder in await repo.list_folders(user_id):
            if folder.name == DEMO_FOLDER:
                await repo.delete_folder(user_id, folder.id)
                print(f"  DELETE  folder {folder.name}")

    return deleted


# ------------------------------------------------------------------
# Seed one scenario
# ------------------------------------------------------------------

async def _seed_scenario(
    scenario: dict,
    index: int,
    total: int,
    user_id: str,
    storage: LocalObjectStorage,
) -> str:
    """Seed a single scenario. Returns the recording id."""
    label = f"[{index + 1}/{total}]"
    title = f"{DEMO_PREFIX} {scenario['title']}"
    key = object_key(user_id, int(time.time() * 1000) + index)

    # 1. Audio object
    audio = _placeholder_audio(scenario["duration_seconds"])
    if audio is not None:
        audio_url = await storage.upload(key, audio, user_id, AUDIO_CONTENT_TYPE)
    else:
        audio_url = storage.public_url(key)

    seconds = scenario["duration_seconds"]
    async with get_session() as session:
        repo = RecordingRepository(session)

        # 2. Recording row
        recording = await repo.create_recording(
            RecordingCreate(
                user_id=user_id,
                title=title,
                audio_url=audio_url,
                transcription=scenario["transcription"],
                summary=scenario["summary"],
                sentiment=scenario["sentiment"],
                tags=scenario["tags"],
                duration_seconds=seconds,
                duration_formatted=format_duration(seconds) if seconds is not None else None,
            )
        )
        print(f"  {label} Recording: {title} (id={recording.id})")

        # 3. Highlights
        if scenario["highlights"]:
            await repo.add_highlights(
                recording.id,
                [
                    HighlightCreate(timestamp_seconds=ts, content=content)
                    for ts, content in scenario["highlights"]
                ],
            )
            print(f"  {label} Highlights: {len(scenario['highlights'])}")

    return recording.id


# ------------------------------------------------------------------
# Main
# ------------------------------------------------------------------

async def seed(user_id: str, clean: bool = False) -> int:
    """Run the full demo data seeding pipeline."""
    print("=" * 60)
    print("EchoVault Demo Data Seeder")
    print("=" * 60)

    storage = LocalObjectStorage()

    # 1. Init DB
    print("\n[1/4] Initializing database...")
    await init_db()
    async with get_session() as session:
        await RecordingRepository(session).ensure_profile(user_id)

    # 2. Clean if requested
    if clean:
        print("\n[2/4] Cleaning existing demo data...")
        deleted = await _clean_demo_data(user_id, storage)
        print(f"  Deleted {deleted} demo recording(s).")
    else:
        print("\n[2/4] Checking for existing demo data...")
        async with get_session() as session:
            stmt = select(Recording).where(
                Recording.user_id == user_id,
                Recording.title.like(f"{DEMO_PREFIX}%"),
            )
            result = await session.execute(stmt)
            existing = result.scalars().all()
            if existing:
                print(f"  Demo data already exists ({len(existing)} recording(s)):")
                for rec in existing:
                    print(f"    - {rec.title}")
                print("  Use --clean to delete and re-seed.")
                return 0

    # 3. Seed scenarios
    print(f"\n[3/4] Seeding {len(SCENARIOS)} scenarios for {user_id}...")
    recording_ids: list[str] = []
    for i, scenario in enumerate(SCENARIOS):
        recording_ids.append(await _seed_scenario(scenario, i, len(SCENARIOS), user_id, storage))

    # 4. Folder
    print("\n[4/4] Filing recordings...")
    async with get_session() as session:
        repo = RecordingRepository(session)
        folder = await repo.create_folder(user_id, DEMO_FOLDER)
        for rec_id in recording_ids[:2]:
            await repo.add_to_folder(user_id, folder.id, rec_id)
    print(f"  Folder '{DEMO_FOLDER}': 2 recording(s)")

    print("\n" + "=" * 60)
    print("Seed Complete!")
    print("=" * 60)
    print(f"  User:        {user_id}")
    print(f"  Recordings:  {len(recording_ids)}")
    print(f"  Highlights:  {sum(len(s['highlights']) for s in SCENARIOS)}")
    print()

    return 0


def main() -> int:
    """Entry point with CLI argument parsing."""
    parser = argparse.ArgumentParser(description="Seed EchoVault demo data")
    parser.add_argument("--user", default="demo-user", help="User id to seed for")
    parser.add_argument(
        "--clean",
        action="store_true",
        help="Delete existing [DEMO] data before seeding",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING)
    return asyncio.run(seed(args.user, clean=args.clean))


if __name__ == "__main__":
    sys.exit(main())
