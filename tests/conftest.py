"""Pytest configuration for nem12-sql tests."""

import os
import sys
from pathlib import Path

# Add src to sys.path for Lambda-style imports (shared, libs, functions)
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

# Powertools settings must be in place before any handler module is imported
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "test")
os.environ.setdefault("AWS_DEFAULT_REGION", "ap-southeast-2")
