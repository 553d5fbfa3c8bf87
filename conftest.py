"""Global pytest configuration."""

import os

# Tests run against the in-process fixture backend
os.environ.setdefault("USE_FIXTURE_BACKEND", "true")
os.environ.setdefault("SIMULATOR_RNG_SEED", "7")
