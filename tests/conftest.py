pytest_plugins = [
    "tests.fixtures.store_fixtures",
    "tests.fixtures.cache_fixtures",
    "tests.fixtures.core_fixtures",
    "tests.fixtures.image_fixtures",
]
