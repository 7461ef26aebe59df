"""Script to seed the configured durable store with the sample inventory."""

import sys
from pathlib import Path

# Add the parent directory to the path so we can import from modelhub
sys.path.insert(0, str(Path(__file__).parent.parent))

from modelhub.config.settings import settings
from modelhub.db.seed import initialize_if_empty
from modelhub.db.store import get_store
from modelhub.services.registry import ModelRegistry


def seed_store() -> bool:
    """Initialize the store if it has never been seeded."""
    store = get_store()
    seeded = initialize_if_empty(store)
    registry = ModelRegistry(store)

    print("=" * 50)
    if seeded:
        print("Seed data written.")
    else:
        print("No seed data written (store already initialized, not empty, or not writable).")
    print("=" * 50)
    print(f"Backend: {settings.effective_store_backend}")
    print(f"Models: {len(registry.get_all())}")
    print(f"Audit entries: {len(registry.get_audit_logs())}")
    print("=" * 50)
    return seeded


def main():
    """Main entry point."""
    print("Seeding store...")
    seed_store()
    print("Done!")


if __name__ == "__main__":
    main()
