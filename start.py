#!/usr/bin/env python3
"""
Startup script for the ContractShield backend
"""
import os
import sys
import subprocess

# Load environment variables from .env file if it exists
from dotenv import load_dotenv
load_dotenv()


def check_requirements():
    """Check the server settings and whether a reasoning provider key is configured."""
    print("🔍 Checking configuration...")

    provider = os.getenv("REASONING_PROVIDER", "groq").lower()
    key_name = "OPENAI_API_KEY" if provider == "openai" else "GROQ_API_KEY"
    if not os.getenv(key_name):
        print(f"⚠️  {key_name} is not set. Analyses will return the reduced-confidence fallback result.")
    else:
        print(f"✅ {key_name} found for provider '{provider}'")

    port = os.getenv("PORT", "5000")
    if not port.isdigit() or not 0 < int(port) < 65536:
        print(f"❌ PORT must be a number between 1 and 65535, got {port!r}")
        return False

    return True


def start_application():
    """Start the API server."""
    print("🚀 Starting ContractShield backend...")

    if not check_requirements():
        print("❌ Requirements check failed. Please fix the issues above.")
        return False

    # Read configuration from environment variables with defaults
    debug_mode = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "5000"))

    print(f"\n📚 API available at: http://{host}:{port}/api")
    if debug_mode:
        print(f"   API documentation at: http://{host}:{port}/docs")
        print("   🔥 Hot reloading enabled (development mode)")
    else:
        print("   ⚙️  Hot reloading disabled (production mode)")
    print("\n🛑 Press Ctrl+C to stop the application\n")

    try:
        uvicorn_args = [
            sys.executable, "-m", "uvicorn",
            "contractshield.main:app",
            "--host", host,
            "--port", str(port)
        ]

        # Add --reload flag in development mode
        if debug_mode:
            uvicorn_args.append("--reload")

        subprocess.run(uvicorn_args)
    except KeyboardInterrupt:
        print("\n👋 Application stopped.")
    return True


if __name__ == "__main__":
    start_application()
