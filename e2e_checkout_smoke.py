#!/usr/bin/env python3
"""
End-to-end checkout smoke tests against a running food ordering service.

Run:
  python e2e_checkout_smoke.py

Optional env:
  SERVICE_BASE=http://localhost:4000
  DEBUG=1

The service must be started with a STRIPE_SECRET_KEY that accepts test-mode
checkout sessions; the payment redirect itself is simulated by calling the
verify endpoint directly.
"""

from __future__ import annotations

import os
import sys
import time
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests


# =========================
# Simple CLI UI (ANSI)
# =========================

class Style:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    GRAY = "\033[90m"


def section_title(text: str):
    print(f"\n{Style.BLUE}{Style.BOLD}== {text} =={Style.RESET}")


def info(msg: str):
    print(f"{Style.CYAN}ℹ {msg}{Style.RESET}")


def ok(msg: str):
    print(f"{Style.GREEN}✔ {msg}{Style.RESET}")


def fail(msg: str):
    print(f"{Style.RED}✘ {msg}{Style.RESET}")


# =========================
# Config
# =========================

SERVICE_BASE = os.getenv("SERVICE_BASE", "http://localhost:4000")
DEBUG = os.getenv("DEBUG", "0").strip() in {"1", "true", "True", "YES", "yes"}

ADDRESS = {
    "firstName": "Smoke",
    "lastName": "Test",
    "email": "smoke@example.com",
    "street": "1 Test Street",
    "city": "Pune",
    "state": "MH",
    "zipcode": "411001",
    "country": "India",
    "phone": "9000000000",
}

FOOD_PRICE = 10
CONVERSION_RATE = 80
DELIVERY_FEE = 160


def debug(msg: str):
    if DEBUG:
        print(f"{Style.GRAY}… {msg}{Style.RESET}")


@dataclass
class TestResult:
    name: str
    success: bool
    details: str = ""


# =========================
# HTTP helpers
# =========================

def http(method: str, path: str, **kwargs) -> requests.Response:
    kwargs.setdefault("timeout", 8)
    url = SERVICE_BASE + path
    debug(f"{method} {url} kwargs={kwargs}")
    return requests.request(method, url, **kwargs)


def wait_for_health(timeout: int = 30) -> bool:
    start = time.time()
    while time.time() - start < timeout:
        try:
            if http("GET", "/health").status_code == 200:
                ok("food service is healthy.")
                return True
        except requests.exceptions.RequestException as e:
            debug(f"service not ready: {e}")
        time.sleep(1)
    fail(f"food service did not become healthy in {timeout} seconds.")
    return False


def seed() -> Dict[str, Any]:
    section_title("Seeding Catalog & User")
    food = http("POST", "/api/food/add", json={"name": "Smoke Paneer", "price": FOOD_PRICE, "category": "Test"}).json()["data"]
    user = http("POST", "/api/user/register", json={"name": "Smoke", "email": f"smoke-{uuid.uuid4().hex[:8]}@example.com"}).json()["data"]
    http("POST", "/api/cart/add", json={"userId": user["_id"], "itemId": food["_id"]})
    info(f"food={food['_id']} user={user['_id']}")
    return {"food": food, "user": user}


def place_order(user_id: str, food_id: str, quantity: int) -> Optional[str]:
    resp = http("POST", "/api/order/place", json={"userId": user_id, "items": [{"_id": food_id, "quantity": quantity}], "address": ADDRESS})
    body = resp.json()
    if not body.get("success"):
        fail(f"place order failed: HTTP {resp.status_code} {body}")
        return None
    return body["session_url"]


def latest_order(user_id: str) -> Optional[Dict[str, Any]]:
    orders = http("POST", "/api/order/userorders", json={"userId": user_id}).json().get("data", [])
    return orders[-1] if orders else None


# =========================
# Scenarios
# =========================

def scenario_paid_order(data) -> List[TestResult]:
    section_title("Scenario 1 - Paid Order")
    user_id, food_id = data["user"]["_id"], data["food"]["_id"]
    results: List[TestResult] = []

    session_url = place_order(user_id, food_id, quantity=2)
    results.append(TestResult("Place Order", session_url is not None, f"session_url={session_url}"))
    if session_url is None:
        return results

    order = latest_order(user_id)
    expected = 2 * FOOD_PRICE * CONVERSION_RATE + DELIVERY_FEE
    success = order is not None and order["amount"] == expected
    results.append(TestResult("Order Amount", success, f"expected {expected}, got {order and order['amount']}"))

    cart = http("POST", "/api/cart/get", json={"userId": user_id}).json().get("cartData")
    results.append(TestResult("Cart Cleared", cart == {}, f"cartData={cart}"))

    verify = http("POST", "/api/order/verify", json={"orderId": order["_id"], "success": "true"}).json()
    paid = latest_order(user_id)
    results.append(TestResult("Verify Paid", verify.get("success") is True and paid["payment"] is True, f"verify={verify}"))

    status = http("POST", "/api/order/status", json={"orderId": order["_id"], "status": "Out for delivery"}).json()
    results.append(TestResult("Update Status", status.get("success") is True and latest_order(user_id)["status"] == "Out for delivery"))
    return results


def scenario_cancelled_order(data) -> List[TestResult]:
    section_title("Scenario 2 - Cancelled Payment")
    user_id, food_id = data["user"]["_id"], data["food"]["_id"]
    results: List[TestResult] = []

    before = len(http("POST", "/api/order/userorders", json={"userId": user_id}).json().get("data", []))
    if place_order(user_id, food_id, quantity=1) is None:
        return [TestResult("Place Order", False)]

    order = latest_order(user_id)
    verify = http("POST", "/api/order/verify", json={"orderId": order["_id"], "success": "false"}).json()
    after = len(http("POST", "/api/order/userorders", json={"userId": user_id}).json().get("data", []))
    results.append(TestResult("Cancelled Order Removed", verify.get("success") is False and after == before, f"before={before}, after={after}"))
    return results


def scenario_rejections(data) -> List[TestResult]:
    section_title("Scenario 3 - Rejected Requests")
    results: List[TestResult] = []

    bad_user = http("POST", "/api/order/place", json={"userId": "nope", "items": [{"_id": data["food"]["_id"], "quantity": 1}], "address": ADDRESS})
    results.append(TestResult("Invalid User ID", bad_user.status_code == 400, bad_user.text))

    empty = http("POST", "/api/order/place", json={"userId": data["user"]["_id"], "items": [], "address": ADDRESS})
    results.append(TestResult("Empty Cart", empty.status_code == 400, empty.text))
    return results


def print_results(results: List[TestResult]):
    print(f"\n{Style.BOLD}================ TEST RESULTS ================ {Style.RESET}")
    passed = 0
    for r in results:
        icon = "✅" if r.success else "❌"
        color = Style.GREEN if r.success else Style.RED
        print(f"{color}{icon} {r.name}{Style.RESET}")
        if r.details:
            print(f"    {Style.DIM}{r.details}{Style.RESET}")
        if r.success:
            passed += 1

    failed = len(results) - passed
    print(f"Total tests: {len(results)}  |  Passed: {Style.GREEN}{passed}{Style.RESET}  |  Failed: {Style.RED}{failed}{Style.RESET}")
    return failed


def main():
    info("Waiting for the service to become healthy...")
    if not wait_for_health():
        sys.exit(1)

    data = seed()
    results: List[TestResult] = []
    results.extend(scenario_paid_order(data))
    results.extend(scenario_cancelled_order(data))
    results.extend(scenario_rejections(data))

    if print_results(results):
        sys.exit(1)


if __name__ == "__main__":
    main()
