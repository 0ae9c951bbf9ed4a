import unittest

from app.db.session import normalize_database_url


class TestNormalizeDatabaseUrl(unittest.TestCase):
    def test_plain_postgres_urls_get_asyncpg_driver(self):
        self.assertEqual(
            normalize_database_url("postgresql://u:p@db:5432/app"), "postgresql+asyncpg://u:p@db:5432/app"
        )
        self.assertEqual(
            normalize_database_url("postgres://u:p@db:5432/app"), "postgresql+asyncpg://u:p@db:5432/app"
        )

    def test_explicit_driver_is_left_alone(self):
        url = "postgresql+asyncpg://u:p@db:5432/app"
        self.assertEqual(normalize_database_url(url), url)


if __name__ == "__main__":
    unittest.main()
