#!/usr/bin/env python3
"""
Upload a certificate file to the prefill endpoint and print the result.

When the service reports that a password is required, asks once on the
terminal and resubmits the same file with it.

Usage: python scripts/prefill_upload.py path/to/cert.p12
"""
import getpass
import os
import sys
import requests

API_BASE_URL = os.getenv("PREFILL_API_URL", "http://localhost:8000")


def upload(path, password=None):
    data = {"password": password} if password is not None else {}
    with open(path, "rb") as fh:
        files = {"file": (os.path.basename(path), fh, "application/octet-stream")}
        return requests.post(f"{API_BASE_URL}/certificates/prefill", files=files, data=data, timeout=30)


def main():
    if len(sys.argv) != 2:
        print(__doc__.strip().splitlines()[-1])
        sys.exit(2)

    path = sys.argv[1]
    try:
        response = upload(path)
        body = response.json()
        if body.get("requiresPassword"):
            password = getpass.getpass(f"{body.get('message')} ")
            response = upload(path, password)
            body = response.json()
    except (OSError, requests.RequestException, ValueError) as e:
        print(f"❌ Upload failed: {e}")
        sys.exit(1)

    if not body.get("success"):
        print(f"❌ {body.get('message')} [{body.get('errorKind', 'unknown')}]")
        sys.exit(1)

    print("\n📋 Prefill")
    print("-" * 30)
    print(f"Name        : {body['suggestedName']}")
    print(f"Expiry date : {body['expiryDate']}")
    print(f"Notes       : {body['notes']}")


if __name__ == "__main__":
    main()
