#!/usr/bin/env python3
"""
Setup validation script for Report OCR.

Checks all system requirements and provides guidance for missing components.
"""

import os
import sys
from pathlib import Path


def print_header(text: str):
    """Print a formatted header."""
    print(f"\n{'=' * 60}")
    print(f"  {text}")
    print('=' * 60)


def print_check(name: str, status: bool, message: str = ""):
    """Print a check result."""
    icon = "✅" if status else "❌"
    print(f"{icon} {name}: {message}")


def print_warning(message: str):
    """Print a warning message."""
    print(f"⚠️  {message}")


def print_info(message: str):
    """Print an info message."""
    print(f"ℹ️  {message}")


def check_python_version():
    """Check Python version."""
    print_header("Python Version")

    version = sys.version_info
    required = (3, 9)

    is_ok = version >= required
    print_check(
        "Python",
        is_ok,
        f"{version.major}.{version.minor}.{version.micro} "
        f"({'OK' if is_ok else f'requires {required[0]}.{required[1]}+'})"
    )

    return is_ok


def check_gemini():
    """Check the Gemini API key."""
    print_header("Gemini (Cloud)")

    try:
        from dotenv import load_dotenv
        load_dotenv()
    except ImportError:
        print_warning("python-dotenv not installed - .env file not loaded")

    if os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY"):
        print_check("Gemini API Key", True, "Configured")
        return True

    print_check("Gemini API Key", False, "Not set")
    print_info("Set GEMINI_API_KEY in your environment or .env file")
    return False


def check_lm_studio():
    """Check LM Studio server."""
    print_header("LM Studio (Local Vision Model)")

    base_url = os.getenv("LM_STUDIO_BASE_URL", "http://localhost:1234/v1")
    try:
        import requests
    except ImportError:
        print_warning("requests library not installed - cannot check LM Studio")
        return False

    try:
        response = requests.get(f"{base_url}/models", timeout=5)
    except requests.exceptions.ConnectionError:
        print_check("LM Studio Server", False, "Not running")
        print_info("Download from: https://lmstudio.ai")
        print_info("Start the local server after loading a vision model")
        return False

    if response.status_code == 200:
        models = [m.get("id", "") for m in response.json().get("data", [])]
        print_check("LM Studio Server", True, f"Running at {base_url}")
        if models:
            print_info(f"Loaded models: {', '.join(models[:5])}")
        return True

    print_check("LM Studio Server", False, "Not responding correctly")
    return False


def check_python_packages():
    """Check required Python packages."""
    print_header("Python Packages")

    # (import name, package name)
    required_packages = [
        ("streamlit", "streamlit"),
        ("PIL", "Pillow"),
        ("openpyxl", "openpyxl"),
        ("pandas", "pandas"),
        ("requests", "requests"),
        ("tenacity", "tenacity"),
        ("dotenv", "python-dotenv"),
    ]

    all_ok = True

    for import_name, display_name in required_packages:
        try:
            __import__(import_name)
            print_check(display_name, True, "Installed")
        except ImportError:
            print_check(display_name, False, "Not installed")
            all_ok = False

    if not all_ok:
        print_info("\nInstall missing packages with:")
        print_info("  pip install -e .")

    return all_ok


def check_env_file():
    """Check for .env file."""
    print_header("Environment Configuration")

    env_file = Path(".env")
    env_example = Path(".env.example")

    if env_file.exists():
        print_check(".env file", True, "Found")
        return True

    print_check(".env file", False, "Not found")
    if env_example.exists():
        print_info("Copy .env.example to .env and configure:")
        print_info("  cp .env.example .env")
    return False


def main():
    """Run all checks."""
    print("\n" + "=" * 60)
    print("  Report OCR - Setup Validation")
    print("=" * 60)

    results = {}

    # Run checks
    results["python"] = check_python_version()
    results["packages"] = check_python_packages()
    results["env"] = check_env_file()
    results["gemini"] = check_gemini()
    results["lm_studio"] = check_lm_studio()

    # Summary
    print_header("Summary")

    critical_ok = results["python"] and results["packages"]
    provider_ok = results["gemini"] or results["lm_studio"]

    if critical_ok and provider_ok:
        print("✅ System is ready to run the application!")
        print("\nStart with:")
        print("  streamlit run report_ocr/main.py")
    else:
        print("❌ Some requirements are missing:")

        if not results["python"]:
            print("  - Python 3.9+ required")
        if not provider_ok:
            print("  - A Gemini API key or a running LM Studio server is required")
        if not results["packages"]:
            print("  - Some Python packages missing (run: pip install -e .)")

    print()
    return 0 if (critical_ok and provider_ok) else 1


if __name__ == "__main__":
    sys.exit(main())
