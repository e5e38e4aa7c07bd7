#!/usr/bin/env python3
"""
Basic bus factor usage example.

Runs the whole pipeline against the in-memory fake API, so no token or
network access is needed.
Run with: python examples/basic_usage.py
"""

import asyncio

from busfactor import BusFactorError, compute_bus_factor
from busfactor.testing import FakeGitHubAPI, create_contribution_set, create_test_client

print("=== Bus Factor Basic Usage Example ===\n")

# 1. Bus factor of a single contribution set
print("1. Computing a bus factor...")
contribution_set = create_contribution_set([("alice", 50), ("bob", 30), ("carol", 20)])
print(f"   Commits: {[c.commits for c in contribution_set.contributors]}")
print(f"   Bus factor: {compute_bus_factor(contribution_set)}")
assert compute_bus_factor(contribution_set) == 1

print("\n   OK: Calculator working\n")

# 2. Full pipeline against the fake API
print("2. Running the pipeline...")
api = FakeGitHubAPI()
api.add_repository("rust-lang", "rust", stars=90_000, language="Rust", contributors=[("bors", 10), ("a", 10), ("b", 10), ("c", 10)])
api.add_repository("tokio-rs", "tokio", stars=25_000, language="Rust", contributors=[("carllerche", 80), ("hawkw", 20)])
api.add_repository("ghost", "town", stars=5_000, language="Rust")
api.fail("/repos/ghost/town/contributors", 404)


async def main() -> None:
    async with create_test_client(api, concurrency_limit=2) as client:
        results = await client.run("rust", 3)

    for result in results:
        if result.ok:
            print(f"   {result.repository.full_name}: bus factor {result.bus_factor}")
        else:
            print(f"   {result.repository.full_name}: {result.failure}")


try:
    asyncio.run(main())
except BusFactorError as e:
    print(f"   Listing failed: {e.code}: {e.message}")

print("\n   OK: Pipeline working\n")
print("=== All examples completed ===")
