import os

# Set up test environment variables before importing any application code.
# Configuration overrides from the host environment must not leak into tests.
for key in [k for k in os.environ if k.startswith("BANLIST_")]:
    del os.environ[key]
