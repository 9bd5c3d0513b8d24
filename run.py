#!/usr/bin/env python3
"""
Place Details Cache - Run Script
This script starts the FastAPI place cache server
"""

import sys
import subprocess
import socket
from pathlib import Path

def print_colored(message, color="blue"):
    """Print colored output"""
    colors = {
        "red": "\033[91m",
        "green": "\033[92m",
        "yellow": "\033[93m",
        "blue": "\033[94m",
        "reset": "\033[0m"
    }
    print(f"{colors.get(color, '')}{message}{colors['reset']}")

def check_port_open(host, port):
    """Check if a port is open"""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.settimeout(2)
    result = sock.connect_ex((host, port))
    sock.close()
    return result == 0

def main():
    print_colored("🚀 Starting Place Details Cache...", "blue")

    if not Path("placecache/main.py").exists():
        print_colored("❌ Error: placecache/main.py not found. Run this script from the project root.", "red")
        sys.exit(1)

    if not Path(".env").exists():
        print_colored("⚠️  Warning: .env file not found, using defaults.", "yellow")
        print("Set at least:")
        print("  GOOGLE_MAPS_API_KEY=your_api_key_here")
        print("  STORAGE_MODE=local  # or mongodb")

    from placecache.core.config import settings

    if settings.STORAGE_MODE == "mongodb":
        print_colored("🔍 Checking MongoDB connection...", "blue")
        if not check_port_open("localhost", 27017):
            print_colored("⚠️  Warning: MongoDB doesn't appear to be running on localhost:27017", "yellow")
            print("Remote sync and fallback reads will fail until it is reachable.")

    print_colored("✅ All checks passed!", "green")
    print("📍 Service will be available at: http://localhost:8000")
    print("📍 API Documentation: http://localhost:8000/docs")
    print()

    try:
        subprocess.run([
            sys.executable, "-m", "uvicorn",
            "placecache.main:app",
            "--reload",
            "--host", "0.0.0.0",
            "--port", "8000"
        ], check=True)
    except KeyboardInterrupt:
        print_colored("\n👋 Server stopped.", "yellow")
    except subprocess.CalledProcessError as e:
        print_colored(f"\n❌ Error starting server: {e}", "red")
        sys.exit(1)

if __name__ == "__main__":
    main()
