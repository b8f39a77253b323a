# File: setup.py

from pathlib import Path
from setuptools import setup, find_packages

REQUIREMENTS_FILE = Path(__file__).parent / 'requirements.txt'
README_FILE = Path(__file__).parent / 'DESIGN.md'

# -------------------- Helper Functions --------------------

def read_requirements():
    if not REQUIREMENTS_FILE.exists():
        return []
    with open(REQUIREMENTS_FILE, 'r', encoding='utf-8') as f:
        return [
            line.strip() for line in f
            if line.strip() and not line.startswith('#')
        ]


# -------------------- Package --------------------

setup(
    name='care-priority-engine',
    version='1.0.0',
    description='Due-date resolution, urgency tiers, card queue and weekly digest for a pet-care tracker',
    long_description=README_FILE.read_text(encoding='utf-8') if README_FILE.exists() else '',
    long_description_content_type='text/markdown',
    packages=find_packages(include=['care_engine', 'care_engine.*']),
    python_requires='>=3.8',
    install_requires=read_requirements(),
    extras_require={
        'test': ['pytest>=7.0'],
    },
)
