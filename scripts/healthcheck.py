#!/usr/bin/env python3
import os
import requests

URL = os.getenv("PREFILL_API_URL", "http://localhost:8000") + "/health/detailed"

def main():
    try:
        resp = requests.get(URL, timeout=5)
        resp.raise_for_status()
        data = resp.json()
    except Exception as e:
        print(f"❌ Failed to fetch health: {e}")
        return

    print("\n📋 System Health Report")
    print("-" * 30)
    print(f"Status      : {data['status'].upper()}")
    print(f"Timestamp   : {data['timestamp']}")
    print(f"Uptime      : {data['uptime']} seconds\n")

    limits = data.get("limits", {})
    print("📦 Upload Limits")
    print(f"   Max File Size (bytes) : {limits.get('max_file_size', 0)}")
    print(f"   Allowed Extensions    : {', '.join(limits.get('allowed_extensions', []))}")

if __name__ == "__main__":
    main()
