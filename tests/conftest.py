"""Shared test setup."""

import os
import tempfile
from pathlib import Path

# Modules that open the notes file on import must not touch ./data.
os.environ.setdefault("NOTES_FILE", str(Path(tempfile.mkdtemp()) / "notes.json"))
