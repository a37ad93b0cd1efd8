"""Test package; force the testing environment before settings load."""

import os

os.environ.setdefault("ENVIRONMENT", "testing")
