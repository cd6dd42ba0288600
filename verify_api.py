import requests
import json
import os
import sys

BASE_URL = os.getenv("BLOG_API_URL", "http://localhost:5000")
PASSWORD = os.getenv("ADMIN_PASSWORD", "")

def print_response(name, response):
    print(f"--- {name} ---")
    print(f"Status: {response.status_code}")
    try:
        print(json.dumps(response.json(), indent=2, ensure_ascii=False))
    except ValueError:
        print(response.text)
    print("\n")

def run_verification():
    # 1. Health
    print("1. Checking health...")
    resp = requests.get(f"{BASE_URL}/api/health")
    print_response("Health", resp)

    # 2. Admin login
    print("2. Logging in as admin...")
    resp = requests.post(f"{BASE_URL}/blog/api/admin/login", json={"password": PASSWORD})
    print_response("Login", resp)
    if resp.status_code != 200:
        print("Login failed, aborting.")
        sys.exit(1)
    token = resp.json()["token"]
    headers = {"Authorization": f"Bearer {token}"}

    # 3. Create a draft
    print("3. Creating draft article...")
    resp = requests.post(f"{BASE_URL}/api/articles", headers=headers, json={
        "title": "Smoke test article",
        "content": "word " * 250,
        "tags": ["smoke-test"],
    })
    print_response("Create Article", resp)
    article_id = resp.json()["id"]

    # 4. Publish, unpublish, republish (published_date must not move)
    print("4. Toggling publish state...")
    first = requests.put(f"{BASE_URL}/api/articles/{article_id}", headers=headers, json={"published": True}).json()
    requests.put(f"{BASE_URL}/api/articles/{article_id}", headers=headers, json={"published": False})
    again = requests.put(f"{BASE_URL}/api/articles/{article_id}", headers=headers, json={"published": True}).json()
    print(f"published_date first={first['published_date']} after toggle={again['published_date']}\n")

    # 5. Search
    print("5. Searching articles...")
    resp = requests.get(f"{BASE_URL}/api/articles", params={"search": "smoke"})
    print_response("Search Articles", resp)

    # 6. Stats
    resp = requests.get(f"{BASE_URL}/api/articles/stats")
    print_response("Stats", resp)

    # 7. Clean up
    print("7. Deleting article...")
    resp = requests.delete(f"{BASE_URL}/api/articles/{article_id}", headers=headers)
    print_response("Delete Article", resp)
    resp = requests.delete(f"{BASE_URL}/api/articles/{article_id}", headers=headers)
    print_response("Delete Again (Expected 404)", resp)

if __name__ == "__main__":
    run_verification()
