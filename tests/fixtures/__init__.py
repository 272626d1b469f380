"""Test fixtures for the OneDB installer tests.

- installer: Client SDK trees, SDK and build.zip archives, a fake builder

Import fixtures in your tests using:
    from tests.fixtures.installer import make_sdk_tree, FakeBuilder
"""

__all__ = [
    "installer",
]
