"""Script to export the model inventory to a JSON file."""

import argparse
import sys
from pathlib import Path

# Add the parent directory to the path so we can import from modelhub
sys.path.insert(0, str(Path(__file__).parent.parent))

from modelhub.db.store import get_store
from modelhub.services.data_transfer import export_filename, export_models
from modelhub.services.registry import ModelRegistry


def main():
    parser = argparse.ArgumentParser(description="Export all models as JSON")
    parser.add_argument("--output-dir", default=".", help="Directory for the export file")
    args = parser.parse_args()

    output = Path(args.output_dir) / export_filename()
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(export_models(ModelRegistry(get_store())), encoding="utf-8")
    print(f"Exported models to {output}")


if __name__ == "__main__":
    main()
