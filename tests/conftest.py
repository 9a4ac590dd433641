"""
Pytest configuration file.

Puts the repo root on sys.path so that 'import src...' and 'import actions...'
work without installing the project.
"""
import sys
from pathlib import Path

repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))
