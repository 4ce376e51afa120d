from __future__ import annotations

import unittest


class TestPublicApiLockContract(unittest.TestCase):
    def test_api_module_exports_are_present(self) -> None:
        import tempora.api as api

        self.assertTrue(hasattr(api, "__all__"))
        self.assertIsInstance(api.__all__, (list, tuple))
        self.assertEqual(len(api.__all__), len(api._PUBLIC_EXPORTS))

        for name in api.__all__:
            self.assertIsInstance(name, str)
            self.assertTrue(hasattr(api, name), f"tempora.api missing public name: {name}")
            self.assertIsNotNone(getattr(api, name), f"tempora.api {name} is None")

    def test_package_reexports_match_api_all(self) -> None:
        import tempora
        import tempora.api as api

        for name in api.__all__:
            self.assertTrue(hasattr(tempora, name), f"tempora package does not re-export: {name}")
            self.assertIs(getattr(tempora, name), getattr(api, name), f"tempora.{name} must be same object as tempora.api.{name}")

    def test_public_exports_are_sorted_and_consistent(self) -> None:
        import tempora.api as api

        self.assertIsInstance(api._PUBLIC_EXPORTS, tuple)
        self.assertEqual(len(set(api._PUBLIC_EXPORTS)), len(api._PUBLIC_EXPORTS))
        self.assertEqual(list(api._PUBLIC_EXPORTS), sorted(api._PUBLIC_EXPORTS))

        expected_all = [n for n in api._PUBLIC_EXPORTS if n in api.__dict__]
        self.assertEqual(api.__all__, expected_all)


if __name__ == "__main__":
    unittest.main(verbosity=2)
