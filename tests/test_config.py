from __future__ import annotations

import json
import os
import tempfile
import unittest
from pathlib import Path

from import_boundaries.config import (
    BOUNDARIES_TEMPLATE,
    DEFAULT_INCLUDE_GLOBS,
    ConfigError,
    build_config,
    ensure_boundaries_template,
    load_config,
    matches_glob,
)
from import_boundaries.paths import DEFAULT_FILE_EXTENSIONS


class BuildConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory(prefix="boundaries-config-")
        self.root = Path(os.path.realpath(self._tmp.name))

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_defaults(self) -> None:
        cfg = build_config({"boundaries": [{"dir": "domain", "alias": "@domain"}]}, cwd=self.root)
        self.assertEqual(cfg.cwd, str(self.root))
        self.assertEqual(cfg.root_dir, "src")
        self.assertEqual(cfg.cross_boundary_style, "alias")
        self.assertEqual(cfg.barrel_file_name, "index")
        self.assertEqual(cfg.file_extensions, DEFAULT_FILE_EXTENSIONS)
        self.assertEqual(cfg.include_globs, tuple(DEFAULT_INCLUDE_GLOBS))
        self.assertTrue(cfg.enforce_boundaries)
        self.assertFalse(cfg.allow_unknown_boundaries)
        self.assertIsNone(cfg.default_severity)

        (domain,) = cfg.boundaries
        self.assertEqual(domain.identifier, "@domain")
        self.assertEqual(domain.absolute_dir, str(self.root / "src" / "domain"))
        self.assertIsNone(domain.allow_imports_from)
        self.assertFalse(domain.has_policy)

    def test_identifier_precedence(self) -> None:
        cfg = build_config(
            {
                "cross_boundary_style": "absolute",
                "boundaries": [
                    {"dir": "domain", "alias": "@domain", "identifier": "core"},
                    {"dir": "infra/"},
                ],
            },
            cwd=self.root,
        )
        self.assertEqual([b.identifier for b in cfg.boundaries], ["core", "infra"])
        self.assertEqual(cfg.boundaries[1].dir, "infra")

    def test_empty_lists_are_kept(self) -> None:
        cfg = build_config(
            {"boundaries": [{"dir": "domain", "alias": "@domain", "allow_imports_from": [], "deny_imports_from": []}]},
            cwd=self.root,
        )
        self.assertEqual(cfg.boundaries[0].allow_imports_from, ())
        self.assertEqual(cfg.boundaries[0].deny_imports_from, ())
        self.assertTrue(cfg.boundaries[0].has_policy)

    def test_alias_style_requires_aliases(self) -> None:
        with self.assertRaises(ConfigError) as ctx:
            build_config({"boundaries": [{"dir": "domain", "alias": "@domain"}, {"dir": "infra"}]}, cwd=self.root)
        self.assertIn("Missing aliases for: infra", str(ctx.exception))

    def test_schema_violations(self) -> None:
        bad_docs = [
            ({"boundaries": [{"dir": "domain", "alias": "@domain", "allowImportsFrom": []}]}, "$.boundaries[0]"),
            ({"boundaries": [{"dir": "domain", "alias": "@domain", "severity": "fatal"}]}, "$.boundaries[0].severity"),
            ({"boundaries": []}, "$.boundaries"),
            ({"cross_boundary_style": "relative", "boundaries": [{"dir": "d", "alias": "@d"}]}, "$.cross_boundary_style"),
            ({"file_extensions": ["ts"], "boundaries": [{"dir": "d", "alias": "@d"}]}, "$.file_extensions[0]"),
            ([], "$"),
        ]
        for doc, where in bad_docs:
            with self.subTest(where=where):
                with self.assertRaises(ConfigError) as ctx:
                    build_config(doc, cwd=self.root)
                self.assertIn(f"schema violation at {where}", str(ctx.exception))

    def test_load_config_uses_file_directory(self) -> None:
        cfg_path = self.root / "nested" / "boundaries.json"
        cfg_path.parent.mkdir(parents=True)
        cfg_path.write_text(json.dumps({"root_dir": "lib", "boundaries": [{"dir": "a", "alias": "@a"}]}), encoding="utf-8")
        cfg = load_config(cfg_path)
        self.assertEqual(cfg.cwd, str(self.root / "nested"))
        self.assertEqual(cfg.boundaries[0].absolute_dir, str(self.root / "nested" / "lib" / "a"))

    def test_load_config_errors(self) -> None:
        with self.assertRaises(ConfigError) as ctx:
            load_config(self.root / "missing.json")
        self.assertIn("missing config", str(ctx.exception))

        broken = self.root / "broken.json"
        broken.write_text("{not json", encoding="utf-8")
        with self.assertRaises(ConfigError) as ctx:
            load_config(broken)
        self.assertIn("invalid JSON", str(ctx.exception))


class GlobTests(unittest.TestCase):
    def test_double_star_matches_root(self) -> None:
        self.assertTrue(matches_glob("a.test.ts", "**/*.test.ts"))
        self.assertTrue(matches_glob("src/a/b.test.ts", "**/*.test.ts"))
        self.assertFalse(matches_glob("src/a/b.ts", "**/*.test.ts"))


class TemplateTests(unittest.TestCase):
    def test_seeds_empty_document(self) -> None:
        data: dict = {}
        changed, _reason = ensure_boundaries_template(data)
        self.assertTrue(changed)
        self.assertEqual(data["boundaries"], BOUNDARIES_TEMPLATE)
        self.assertEqual(data["root_dir"], "src")
        self.assertEqual(data["cross_boundary_style"], "alias")

        # Seeded template must itself be a valid config.
        build_config(data, cwd=tempfile.gettempdir())

    def test_idempotent(self) -> None:
        data: dict = {}
        ensure_boundaries_template(data)
        snapshot = json.dumps(data, sort_keys=True)
        changed, _reason = ensure_boundaries_template(data)
        self.assertFalse(changed)
        self.assertEqual(json.dumps(data, sort_keys=True), snapshot)

    def test_keeps_existing_boundaries_and_settings(self) -> None:
        data = {"root_dir": "lib", "boundaries": [{"dir": "core", "alias": "@core"}]}
        changed, reason = ensure_boundaries_template(data)
        self.assertFalse(changed)
        self.assertIn("already configured", reason)
        self.assertEqual(data, {"root_dir": "lib", "boundaries": [{"dir": "core", "alias": "@core"}]})

        partial = {"root_dir": "lib", "boundaries": []}
        self.assertTrue(ensure_boundaries_template(partial)[0])
        self.assertEqual(partial["root_dir"], "lib")


if __name__ == "__main__":
    unittest.main()
