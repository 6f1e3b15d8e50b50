#!/usr/bin/env python3
"""
pageguard Example: Login flow with guarded actions

This example demonstrates how to:
1. Load a page and log in with guarded type/click actions
2. Wait for the application to show up after login
3. Collect failures instead of stopping at the first one
4. Print the outcome trail at the end

Configure via environment variables:
  TEST_URL - The application URL (default: http://localhost:8888)
  TEST_EMAIL - Login email
  TEST_PASSWORD - Login password
  PAGEGUARD_TIMEOUT - Seconds each step may wait (default: 5)
"""

import os
import sys

from playwright.sync_api import sync_playwright

# Add package to path if running directly
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

from pageguard import Locator, OutcomeLog, create_actions

# Configuration via environment variables
BASE_URL = os.environ.get("TEST_URL", "http://localhost:8888")
TEST_EMAIL = os.environ.get("TEST_EMAIL", "")
TEST_PASSWORD = os.environ.get("TEST_PASSWORD", "")

EMAIL = Locator.of("xpath", "//input[@type='email' or @name='email']")
PASSWORD = Locator.of("xpath", "//input[@type='password']")
SUBMIT = Locator.of("xpath", "//button[@type='submit']")
MAIN = Locator.of("tagname", "main")


def main():
    print("=" * 60)
    print("pageguard: Login flow")
    print("=" * 60)

    if not TEST_EMAIL or not TEST_PASSWORD:
        print("WARNING: TEST_EMAIL and TEST_PASSWORD not set")
        print("Set them to test login flow, or test will skip login")

    print(f"URL: {BASE_URL}")
    print()

    log = OutcomeLog(echo=True)

    with sync_playwright() as p:
        browser = p.chromium.launch(headless=True)
        page = browser.new_page()
        actions = create_actions(page, recorder=log)

        failures = 0
        try:
            print("PHASE 1: Page Load & Login")
            print("-" * 40)
            failures += actions.goto_url(BASE_URL)

            if TEST_EMAIL and TEST_PASSWORD and actions.is_element_present(PASSWORD):
                failures += actions.type(EMAIL, TEST_EMAIL)
                failures += actions.type(PASSWORD, TEST_PASSWORD)
                failures += actions.click(SUBMIT)
                failures += actions.wait_for_element_not_present(PASSWORD).failures
            else:
                print("No login page detected (or no credentials set)")
            print()

            print("PHASE 2: Application")
            print("-" * 40)
            failures += actions.wait_for_element_displayed(MAIN).failures
            print(f"Title: {actions.get_title()}")
            print(f"Location: {actions.get_location()}")
            print()
        finally:
            browser.close()

    summary = log.summary()
    print("=" * 60)
    print(f"RESULTS: {summary['passes']}/{summary['actions']} passed")
    print("=" * 60)
    for record in log.failed_records():
        print(f"  ✗ {record.action}")
        print(f"      expected: {record.expected}")
        print(f"      actual:   {record.actual}")

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
