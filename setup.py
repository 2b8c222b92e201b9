"""Packaging for Pomodoro.

Install for development:
    pip install -e ".[test]"

Build a macOS .app bundle:
    pip install py2app
    python setup.py py2app
"""

import sys

from setuptools import setup

APP = ["main.py"]
DATA_FILES = []
OPTIONS = {
    "argv_emulation": False,
    "iconfile": None,
    "plist": {
        "CFBundleName": "Pomodoro",
        "CFBundleDisplayName": "Pomodoro",
        "CFBundleIdentifier": "com.pomodoro.app",
        "CFBundleVersion": "0.1.0",
        "CFBundleShortVersionString": "0.1.0",
        "NSHighResolutionCapable": True,
        "LSMinimumSystemVersion": "13.0",
    },
}

# py2app options only apply when building the bundle
bundle_kwargs = {}
if "py2app" in sys.argv:
    bundle_kwargs = dict(app=APP, data_files=DATA_FILES, options={"py2app": OPTIONS})

setup(
    name="Pomodoro",
    version="0.1.0",
    packages=["pomodoro", "pomodoro.audio", "pomodoro.database", "pomodoro.timer"],
    python_requires=">=3.10",
    install_requires=[
        "PyQt6",
        "numpy",
        "SQLAlchemy>=2.0",
    ],
    extras_require={"test": ["pytest"]},
    entry_points={"gui_scripts": ["pomodoro = pomodoro.__main__:main"]},
    **bundle_kwargs,
)
