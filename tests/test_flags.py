from __future__ import annotations

import unittest

from compdbgen.translate.flags import FlagDeduplicator, pin_version
from compdbgen.translate.policy import CANONICAL_STD_FLAG


class VersionPinTests(unittest.TestCase):
    def test_legacy_standards_collapse_to_canonical(self) -> None:
        for legacy in ("-std=c++11", "-std=c++14", "-std=c++17"):
            pinned = pin_version(legacy)
            self.assertEqual(pinned, CANONICAL_STD_FLAG)
            self.assertEqual(pin_version(pinned), CANONICAL_STD_FLAG)

    def test_other_tokens_pass_through(self) -> None:
        for token in ("-std=c11", "-std=gnu++17", "-Wall", "a.cc"):
            self.assertEqual(pin_version(token), token)


class FlagDeduplicatorTests(unittest.TestCase):
    def test_first_warning_and_std_flag_win(self) -> None:
        d = FlagDeduplicator()
        self.assertTrue(d.admit("-Wall"))
        self.assertTrue(d.admit("-std=c++23"))
        self.assertFalse(d.admit("-Wall"))
        self.assertFalse(d.admit("-std=c++23"))
        self.assertTrue(d.admit("-Wextra"))

    def test_non_subject_tokens_repeat_freely(self) -> None:
        d = FlagDeduplicator()
        for _ in range(3):
            self.assertTrue(d.admit("-isystem"))
            self.assertTrue(d.admit("-DNDEBUG"))

    def test_fresh_instance_has_no_memory(self) -> None:
        self.assertTrue(FlagDeduplicator().admit("-Wall"))
        self.assertTrue(FlagDeduplicator().admit("-Wall"))


if __name__ == "__main__":
    unittest.main()
