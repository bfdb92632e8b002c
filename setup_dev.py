#!/usr/bin/env python3
"""
Development setup script for the storefront API

Creates a virtual environment, installs the package with its test extra and
checks that the application factory imports.
"""

import subprocess
import sys
import os
from pathlib import Path

def run_command(cmd, description):
    """Run a command and handle errors"""
    print(f"📋 {description}...")
    try:
        result = subprocess.run(cmd, shell=True, check=True, capture_output=True, text=True)
        print(f"✅ {description} completed successfully")
        return result.stdout
    except subprocess.CalledProcessError as e:
        print(f"❌ {description} failed: {e}")
        if e.stdout:
            print(f"STDOUT: {e.stdout}")
        if e.stderr:
            print(f"STDERR: {e.stderr}")
        return None

def check_python_version():
    if sys.version_info < (3, 9):
        print("❌ Python 3.9 or higher is required")
        sys.exit(1)
    print(f"✅ Python {sys.version_info.major}.{sys.version_info.minor} detected")

def setup_virtual_environment():
    """Set up virtual environment if it doesn't exist"""
    venv_path = Path(".venv")
    if not venv_path.exists():
        print("🔧 Creating virtual environment...")
        run_command(f"{sys.executable} -m venv .venv", "Virtual environment creation")
        print("💡 Activate with: source .venv/bin/activate")
    else:
        print("✅ Virtual environment already exists")

def install_dependencies():
    in_venv = sys.prefix != sys.base_prefix
    pip_cmd = "pip" if in_venv else f"{sys.executable} -m pip"

    print(f"📦 Installing storefront-api using {pip_cmd}...")
    return run_command(f'{pip_cmd} install -e ".[test]"', "Dependency installation")

def copy_env_file():
    env_path = Path(".env")
    if env_path.exists():
        print("✅ .env already exists")
        return
    env_path.write_text(Path(".env.example").read_text())
    print("🔧 Created .env from .env.example - edit DATABASE_URL and SECRET_KEY")

def test_imports():
    """Check the app factory and its stack import"""
    return run_command(
        f'{sys.executable} -c "from storefront.app import create_app; print(create_app)"',
        "Import check",
    )

def show_next_steps():
    print("\n🎉 Setup completed! Next steps:")
    print("\n1. 🐘 Set up PostgreSQL database:")
    print("   - Create database: createdb storefront_dev")
    print("   - Create tables: flask --app storefront.app init-db")
    print("   - Load sample data: flask --app storefront.app seed")

    print("\n2. 🚀 Start the development server:")
    print("   - storefront   (or: flask --app storefront.app run)")
    print("   - API will be available at http://localhost:5000/api/v1")

    print("\n3. 🧪 Test:")
    print("   - pytest")
    print("   - GET http://localhost:5000/health")
    print("   - Send the session token from /api/v1/auth/login as X-Session-Token")

    print("\n4. 🧹 Housekeeping:")
    print("   - flask --app storefront.app prune-sessions")

def main():
    print("🔧 Storefront API Development Setup")
    print("=" * 40)

    os.chdir(Path(__file__).parent)

    check_python_version()
    setup_virtual_environment()
    copy_env_file()

    if install_dependencies():
        if test_imports():
            print("\n✅ All checks passed!")
            show_next_steps()
        else:
            print("\n❌ Import check failed")
    else:
        print("\n❌ Dependency installation failed")
        print("\n💡 Try:")
        print("  1. Activate virtual environment: source .venv/bin/activate")
        print("  2. Upgrade pip: pip install --upgrade pip")
        print('  3. Install dependencies: pip install -e ".[test]"')

if __name__ == "__main__":
    main()
