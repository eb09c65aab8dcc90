from __future__ import annotations

import posixpath
import unittest

from import_boundaries.boundaries import (
    Boundary,
    alias_subpath_of,
    identifier_of,
    physical_boundary_of,
    policy_boundary_of,
)


SRC = "/proj/src"


def _boundary(dir: str, alias: str | None = None, **kwargs) -> Boundary:
    identifier = kwargs.pop("identifier", None) or alias or dir
    return Boundary(dir=dir, identifier=identifier, absolute_dir=posixpath.join(SRC, dir), alias=alias, **kwargs)


class BoundaryLookupTests(unittest.TestCase):
    def setUp(self) -> None:
        self.domain = _boundary("domain", "@domain", allow_imports_from=())
        self.entities = _boundary("domain/entities", "@entities")
        self.application = _boundary("application", "@application", allow_imports_from=("@domain",))
        self.boundaries = [self.domain, self.entities, self.application]

    def test_physical_boundary_prefers_nearest_ancestor(self) -> None:
        found = physical_boundary_of(f"{SRC}/domain/entities/army/unit.ts", self.boundaries)
        self.assertIs(found, self.entities)

    def test_physical_boundary_of_directory_itself(self) -> None:
        self.assertIs(physical_boundary_of(f"{SRC}/application", self.boundaries), self.application)

    def test_sibling_with_common_prefix_is_not_inside(self) -> None:
        self.assertIsNone(physical_boundary_of(f"{SRC}/domainx/a.ts", self.boundaries))

    def test_outside_every_boundary(self) -> None:
        self.assertIsNone(physical_boundary_of("/proj/scripts/run.ts", self.boundaries))
        self.assertIsNone(policy_boundary_of("/proj/scripts/run.ts", self.boundaries))

    def test_equal_length_match_keeps_first(self) -> None:
        first = _boundary("shared", "@shared")
        second = _boundary("shared", "@shared2")
        self.assertIs(physical_boundary_of(f"{SRC}/shared/x.ts", [first, second]), first)

    def test_policy_boundary_climbs_past_unspecified_child(self) -> None:
        found = policy_boundary_of(f"{SRC}/domain/entities/army/unit.ts", self.boundaries)
        self.assertIs(found, self.domain)

    def test_empty_list_still_declares_policy(self) -> None:
        self.assertTrue(self.domain.has_policy)
        self.assertFalse(self.entities.has_policy)
        self.assertTrue(_boundary("x", deny_imports_from=()).has_policy)
        self.assertTrue(_boundary("y", allow_type_imports_from=("@domain",)).has_policy)

    def test_no_policy_anywhere(self) -> None:
        self.assertIsNone(policy_boundary_of(f"{SRC}/domain/entities/a.ts", [self.entities]))

    def test_identifier(self) -> None:
        self.assertEqual(identifier_of(self.application), "@application")
        self.assertEqual(identifier_of(_boundary("infra")), "infra")
        self.assertEqual(identifier_of(_boundary("infra", "@infra", identifier="infrastructure")), "infrastructure")

    def test_alias_subpath(self) -> None:
        self.assertIs(alias_subpath_of("@domain/entities", self.boundaries), self.domain)
        self.assertIsNone(alias_subpath_of("@domain", self.boundaries))
        self.assertIsNone(alias_subpath_of("@domainx/a", self.boundaries))
        self.assertIsNone(alias_subpath_of("@scope/pkg", self.boundaries))


if __name__ == "__main__":
    unittest.main()
