"""
Vercel serverless function entry point.
Exposes the pet nutrition FastAPI app to the Python runtime.
"""

import sys
from pathlib import Path

# Add the project root to Python path for imports
root_path = Path(__file__).parent.parent
sys.path.insert(0, str(root_path))

from pet_nutrition.main import app  # noqa: E402,F401
