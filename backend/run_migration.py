#!/usr/bin/env python3
"""Apply the database migrations, then load the default users and projects."""
import asyncio
import os
import subprocess
import sys

if __name__ == "__main__":
    script_dir = os.path.dirname(os.path.abspath(__file__))

    try:
        result = subprocess.run(
            ["alembic", "upgrade", "head"],
            cwd=script_dir,
            check=True,
            capture_output=True,
            text=True,
        )
        print("Migration successful!")
        print(result.stdout)
    except subprocess.CalledProcessError as e:
        print("Migration failed!")
        print(e.stderr)
        sys.exit(1)
    except FileNotFoundError:
        print("Alembic not found. Please activate your virtual environment first.")
        sys.exit(1)

    if "--seed" in sys.argv[1:]:
        sys.path.insert(0, script_dir)
        from app.seed import seed

        asyncio.run(seed())
